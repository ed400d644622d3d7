from __future__ import annotations

from pathlib import Path

from lazerlink.errors import InvalidHashError

__all__ = ("FILE_HASH_SIZE", "MD5_HASH_SIZE", "resolve", "hash_to_bytes")

# raw widths of the hashes used by the library (sha256 blobs, md5 beatmaps)
FILE_HASH_SIZE = 32
MD5_HASH_SIZE = 16


def resolve(hash: str, root: str | Path = "") -> Path:
    """Return the sharded storage path of `hash` under `root`.

    >>> resolve("abcd1234", "/lib/files")
    PosixPath('/lib/files/a/ab/abcd1234')
    """
    if len(hash) < 2:
        raise InvalidHashError(f"Hash {hash!r} is too short to shard.")

    return Path(root) / hash[:1] / hash[:2] / hash


def hash_to_bytes(hash: str, size: int) -> bytes:
    """Decode a hex `hash` into exactly `size` raw bytes."""
    try:
        raw = bytes.fromhex(hash)
    except ValueError:
        raise InvalidHashError(f"Hash {hash!r} is not valid hex.") from None

    if len(raw) != size:
        raise InvalidHashError(
            f"Hash {hash!r} decodes to {len(raw)} bytes, expected {size}.",
        )

    return raw
