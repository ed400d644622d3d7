from __future__ import annotations

import ctypes
import os
import sys

import lazerlink.settings
from lazerlink.constants.link_modes import LinkMode
from lazerlink.logging import Ansi
from lazerlink.logging import log


def is_running_as_admin() -> bool:
    try:
        return os.geteuid() == 0  # type: ignore[attr-defined, no-any-return, unused-ignore]
    except AttributeError:
        pass

    try:
        return ctypes.windll.shell32.IsUserAnAdmin() == 1  # type: ignore[attr-defined, no-any-return, unused-ignore]
    except AttributeError:
        return False


def display_startup_dialog(mode: LinkMode) -> None:
    """Print any general information or warnings to the console."""
    if lazerlink.settings.DEBUG:
        log("running in debug mode", Ansi.LMAGENTA)

    # windows only allows symlinks for admins (or with developer mode on)
    if mode == LinkMode.LINK and sys.platform == "win32" and not is_running_as_admin():
        log(
            "Creating symlinks on Windows needs administrator rights or "
            "developer mode; pass --copy if linking fails.",
            Ansi.LYELLOW,
        )
