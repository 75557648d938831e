"""Python-based reader for the version field of a package manifest."""

import json
from pathlib import Path

from ..exceptions import ManifestError


class ManifestReader:
    """Reads and validates the `version` of a JSON package manifest."""

    def __init__(self, manifest_path: Path) -> None:
        if not manifest_path.is_file():
            raise ManifestError(f"Manifest not found: {manifest_path}")
        self.manifest_path = manifest_path
        self.version = self._read_version()

    def _read_version(self) -> str:
        try:
            data = json.loads(self.manifest_path.read_text(encoding="utf-8"))
        except (OSError, UnicodeDecodeError, json.JSONDecodeError) as e:
            raise ManifestError(
                f"Unable to parse manifest {self.manifest_path}: {e}"
            ) from e

        version = data.get("version") if isinstance(data, dict) else None
        if not isinstance(version, str) or not version:
            raise ManifestError(
                f"Manifest {self.manifest_path} has no 'version' string."
            )
        return version
