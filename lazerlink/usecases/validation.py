from __future__ import annotations

import os
from dataclasses import dataclass
from dataclasses import field
from pathlib import Path

from lazerlink.logging import Ansi
from lazerlink.logging import log


@dataclass
class ValidationReport:
    removed_links: list[Path] = field(default_factory=list)
    removed_dirs: list[Path] = field(default_factory=list)

    def __str__(self) -> str:
        return (
            f"removed {len(self.removed_links)} dangling links "
            f"& {len(self.removed_dirs)} empty directories"
        )


def _is_empty_dir(path: str) -> bool:
    with os.scandir(path) as entries:
        return next(entries, None) is None


def validate(output_path: Path) -> ValidationReport:
    """\
    Prune an output tree of links whose targets have disappeared,
    then of directories left empty.

    Plain files (e.g. from copy mode) and live links are left alone,
    and `output_path` itself is always kept.
    """
    report = ValidationReport()
    root = os.path.abspath(output_path)

    # bottom-up, so a directory's contents are handled before it is
    for dirpath, _, filenames in os.walk(root, topdown=False):
        for filename in filenames:
            path = os.path.join(dirpath, filename)

            # os.path.exists follows the link
            if os.path.islink(path) and not os.path.exists(path):
                os.unlink(path)
                report.removed_links.append(Path(path))

        if dirpath != root and _is_empty_dir(dirpath):
            os.rmdir(dirpath)
            report.removed_dirs.append(Path(dirpath))

    log(f"Validated {output_path}: {report}", Ansi.LGREEN)
    return report
