"""
Centralized content hashing for distaudit fingerprints.
"""

from collections.abc import Mapping, Sequence
from pathlib import Path

from cryptography.hazmat.primitives import hashes

from .exceptions import FingerprintError

CHUNK_SIZE = 1024 * 1024


def _new_hash() -> hashes.Hash:
    return hashes.Hash(hashes.SHA256())


def digest_bytes(data: bytes) -> str:
    """Returns the lowercase hex SHA-256 digest of *data*."""
    h = _new_hash()
    h.update(data)
    return h.finalize().hex()


def file_digest(path: Path) -> str:
    """Hashes the full byte content of a file. Metadata is never consulted."""
    h = _new_hash()
    try:
        with path.open("rb") as f:
            while chunk := f.read(CHUNK_SIZE):
                h.update(chunk)
    except OSError as e:
        raise FingerprintError(f"Unable to read '{path}': {e}") from e
    return h.finalize().hex()


def combined_digest(file_list: Sequence[str], digests: Mapping[str, str]) -> str:
    """Hashes the "<path>:<digest>\\n" lines of *file_list*, in list order.

    Undecodable bytes in names round-trip through surrogateescape, so names
    that are not valid UTF-8 hash deterministically.
    """
    joined = "".join(f"{rel_path}:{digests[rel_path]}\n" for rel_path in file_list)
    return digest_bytes(joined.encode("utf-8", "surrogateescape"))
