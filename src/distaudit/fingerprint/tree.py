"""Builds TreeFingerprint values from directories on disk."""

from collections.abc import Iterable
from pathlib import Path

from pyvider.telemetry import logger

from ..crypto import combined_digest, file_digest
from ..models import TreeFingerprint
from .enumerator import enumerate_tree
from .patterns import Pattern


def fingerprint_tree(root: Path, rules: Iterable[Pattern] = ()) -> TreeFingerprint:
    """Enumerates *root*, hashes every file and derives the combined digest.

    Raises FingerprintError if any file cannot be read; a partial fingerprint
    is never returned.
    """
    file_list = enumerate_tree(root, rules)
    digests: dict[str, str] = {}
    for rel_path in file_list:
        digests[rel_path] = file_digest(root / rel_path)

    fingerprint = TreeFingerprint(
        root=str(root),
        file_list=file_list,
        digests=digests,
        combined=combined_digest(file_list, digests),
    )
    logger.debug(
        "Fingerprinted tree",
        root=str(root),
        files=len(file_list),
        combined=fingerprint.combined,
    )
    return fingerprint
