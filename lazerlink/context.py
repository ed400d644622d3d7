from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path

from lazerlink import storage
from lazerlink.errors import SetupError
from lazerlink.paths import DATABASE_FILENAME
from lazerlink.paths import FILES_DIRNAME
from lazerlink.repositories.catalog import Catalog


@dataclass(frozen=True)
class Library:
    """An osu!lazer data directory."""

    root: Path

    @property
    def database_path(self) -> Path:
        return self.root / DATABASE_FILENAME

    @property
    def files_path(self) -> Path:
        return self.root / FILES_DIRNAME

    @classmethod
    def open(cls, root: Path) -> Library:
        """Validate the library layout at `root`."""
        root = root.expanduser().absolute()
        library = cls(root)

        for path in (library.root, library.database_path, library.files_path):
            if not path.exists():
                raise SetupError(f"{path} does not exist.")

        if not library.files_path.is_dir():
            raise SetupError(f"{library.files_path} is not a directory.")

        return library

    def resolve(self, hash: str) -> Path:
        """Return the absolute path of the blob with `hash`."""
        return storage.resolve(hash, self.files_path)


@dataclass
class Context:
    library: Library
    catalog: Catalog


def prepare_output_path(path: Path) -> Path:
    """Ensure `path` is a usable output directory, creating it if missing."""
    path = path.expanduser().absolute()

    if path.exists() and not path.is_dir():
        raise SetupError(f"Output path {path} is not a directory.")

    path.mkdir(parents=True, exist_ok=True)
    return path
