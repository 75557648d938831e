from collections.abc import Mapping
import enum
import types
from typing import Any

from attrs import define, field

STRUCTURAL_EXCLUDES: frozenset[str] = frozenset({"node_modules"})
DEFAULT_MANIFEST_NAME = "package.json"
INSTALLED_ROOT = "node_modules"


def _frozen_mapping(value: Mapping[str, str]) -> Mapping[str, str]:
    return types.MappingProxyType(dict(value))


class Verdict(enum.Enum):
    IDENTICAL = "identical"
    EQUIVALENT_WITH_EXTRAS = "equivalent-with-extras"
    MISMATCHED = "mismatched"


@define(frozen=True, slots=True)
class TreeFingerprint:
    """Sorted file list, per-file digests and one combined digest for a tree."""

    root: str
    file_list: tuple[str, ...] = field(converter=tuple)
    digests: Mapping[str, str] = field(converter=_frozen_mapping)
    combined: str

    def __attrs_post_init__(self) -> None:
        if list(self.file_list) != sorted(set(self.file_list)):
            raise ValueError("file_list must be sorted and free of duplicates.")
        if set(self.digests) != set(self.file_list):
            raise ValueError("digests must cover exactly the entries of file_list.")

    def __len__(self) -> int:
        return len(self.file_list)

    def to_dict(self) -> dict[str, Any]:
        return {
            "root": self.root,
            "combined": self.combined,
            "files": {p: self.digests[p] for p in self.file_list},
        }


@define(frozen=True, slots=True)
class ComparisonResult:
    missing_in_target: tuple[str, ...]
    extra_in_target: tuple[str, ...]
    content_mismatches: tuple[str, ...]
    common_files: tuple[str, ...]
    verdict: Verdict

    @property
    def passed(self) -> bool:
        return (
            self.verdict in (Verdict.IDENTICAL, Verdict.EQUIVALENT_WITH_EXTRAS)
            and not self.content_mismatches
        )

    def to_dict(self) -> dict[str, Any]:
        return {
            "verdict": self.verdict.value,
            "passed": self.passed,
            "missing_in_target": list(self.missing_in_target),
            "extra_in_target": list(self.extra_in_target),
            "content_mismatches": list(self.content_mismatches),
        }


@define(frozen=True, slots=True)
class PackageConfig:
    name: str
    path: str
    dist: str
    build_script: str
    ignore: tuple[str, ...] = field(default=(), converter=tuple)
    ignore_syntax: str = "wildcard"
    installed: str | None = None
    manifest: str = DEFAULT_MANIFEST_NAME

    @property
    def installed_path(self) -> str:
        return self.installed or f"{INSTALLED_ROOT}/{self.name}"


@define(frozen=True, slots=True)
class PackageReport:
    name: str
    errors: tuple[str, ...] = field(default=(), converter=tuple)
    source_version: str | None = None
    installed_version: str | None = None
    source_fingerprint: TreeFingerprint | None = None
    installed_fingerprint: TreeFingerprint | None = None
    comparison: ComparisonResult | None = None

    @property
    def passed(self) -> bool:
        return not self.errors

    def to_dict(self) -> dict[str, Any]:
        return {
            "name": self.name,
            "passed": self.passed,
            "errors": list(self.errors),
            "source_version": self.source_version,
            "installed_version": self.installed_version,
            "source_combined": (
                self.source_fingerprint.combined if self.source_fingerprint else None
            ),
            "installed_combined": (
                self.installed_fingerprint.combined
                if self.installed_fingerprint
                else None
            ),
            "comparison": self.comparison.to_dict() if self.comparison else None,
        }


@define(frozen=True, slots=True)
class AuditReport:
    packages: tuple[PackageReport, ...] = field(converter=tuple)

    @property
    def passed(self) -> bool:
        return all(p.passed for p in self.packages)

    @property
    def failed(self) -> tuple[PackageReport, ...]:
        return tuple(p for p in self.packages if not p.passed)

    def to_dict(self) -> dict[str, Any]:
        return {
            "passed": self.passed,
            "packages": [p.to_dict() for p in self.packages],
        }
