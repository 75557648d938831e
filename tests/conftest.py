"""Pytest fixtures for the entire distaudit test suite."""

import json
from pathlib import Path
from typing import Callable

import pytest

TreeFactory = Callable[[Path, dict[str, str | bytes]], Path]


@pytest.fixture
def make_tree() -> TreeFactory:
    """A factory fixture that writes a mapping of relative path -> content under a root."""

    def _make_tree(root: Path, files: dict[str, str | bytes]) -> Path:
        root.mkdir(parents=True, exist_ok=True)
        for rel_path, content in files.items():
            target = root / rel_path
            target.parent.mkdir(parents=True, exist_ok=True)
            if isinstance(content, bytes):
                target.write_bytes(content)
            else:
                target.write_text(content)
        return root

    return _make_tree


@pytest.fixture
def make_workspace(make_tree: TreeFactory) -> Callable[..., Path]:
    """
    A factory fixture that lays out a monorepo-style workspace: a source
    package under `packages/<name>` with a prebuilt `dist/`, and its installed
    copy under `node_modules/<name>`.
    """

    def _make_workspace(
        root: Path,
        name: str = "widget",
        dist_files: dict[str, str | bytes] | None = None,
        installed_files: dict[str, str | bytes] | None = None,
        source_version: str = "1.0.0",
        installed_version: str = "1.0.0",
    ) -> Path:
        dist_files = {"a.js": "A", "b.js": "B"} if dist_files is None else dist_files
        installed_files = dict(dist_files) if installed_files is None else installed_files

        package_dir = root / "packages" / name
        make_tree(package_dir / "dist", dist_files)
        (package_dir / "package.json").write_text(
            json.dumps({"name": name, "version": source_version})
        )

        installed_dir = root / "node_modules" / name
        make_tree(installed_dir, installed_files)
        (installed_dir / "package.json").write_text(
            json.dumps({"name": name, "version": installed_version})
        )
        return root

    return _make_workspace
