from __future__ import annotations

import os
from importlib import metadata
from pathlib import Path

from dotenv import load_dotenv

from lazerlink.settings_utils import read_bool
from lazerlink.settings_utils import read_path

load_dotenv()

# library root; falls back to the platform default (see lazerlink.paths)
LAZER_PATH = read_path(os.environ.get("LAZER_PATH"))

# catalog snapshot (json or binary export) describing the library
CATALOG_PATH = read_path(os.environ.get("CATALOG_PATH"))

LOGGING_CONFIG_PATH = read_path(os.environ.get("LOGGING_CONFIG_PATH")) or (
    Path(__file__).parent / "logging.yaml"
)

DEBUG = read_bool(os.environ.get("DEBUG", "false"))

try:
    VERSION = metadata.version("lazerlink")
except metadata.PackageNotFoundError:
    VERSION = "0.0.0"
