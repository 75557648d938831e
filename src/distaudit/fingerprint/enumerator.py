"""Deterministic recursive listing of the files under a tree root."""

from collections.abc import Iterable, Iterator
import os
from pathlib import Path

from pyvider.telemetry import logger

from ..exceptions import FingerprintError
from ..models import STRUCTURAL_EXCLUDES
from .patterns import Pattern, is_ignored


def _walk(
    directory: Path, prefix: str, rules: tuple[Pattern, ...]
) -> Iterator[str]:
    try:
        entries = sorted(os.scandir(directory), key=lambda e: e.name)
    except OSError as e:
        raise FingerprintError(f"Unable to list '{directory}': {e}") from e

    for entry in entries:
        if entry.name in STRUCTURAL_EXCLUDES:
            continue

        rel_path = f"{prefix}{entry.name}"
        if is_ignored(rel_path, rules):
            continue

        if entry.is_dir(follow_symlinks=False):
            yield from _walk(Path(entry.path), f"{rel_path}/", rules)
        elif entry.is_symlink() and entry.is_dir():
            logger.debug("Skipping symlinked directory", path=rel_path)
        else:
            yield rel_path


def enumerate_tree(root: Path, rules: Iterable[Pattern] = ()) -> list[str]:
    """
    Lists every non-ignored file under *root* as a sorted, `/`-separated
    relative path. A missing root is not an error and yields an empty list.
    """
    if not root.is_dir():
        logger.debug("Tree root absent, nothing to enumerate", root=str(root))
        return []
    return sorted(_walk(root, "", tuple(rules)))
