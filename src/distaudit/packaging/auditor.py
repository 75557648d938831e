"""Per-package audit: version check, build, fingerprint and compare."""

from collections.abc import Sequence
from concurrent.futures import ThreadPoolExecutor
from pathlib import Path
import subprocess
from typing import Any

from pyvider.telemetry import logger

from ..exceptions import AuditError, BuildError
from ..fingerprint import compare, compile_patterns, fingerprint_tree
from ..models import (
    AuditReport,
    ComparisonResult,
    PackageConfig,
    PackageReport,
    TreeFingerprint,
)
from .reader import ManifestReader


class PackageAuditor:
    """Audits one configured package against its installed copy."""

    def __init__(self, config: PackageConfig, root_dir: Path) -> None:
        self.config = config
        self.root_dir = root_dir
        self.package_dir = root_dir / config.path
        self.dist_dir = self.package_dir / config.dist
        self.installed_dir = root_dir / config.installed_path
        self.rules = compile_patterns(config.ignore, config.ignore_syntax)

    def check_versions(self) -> tuple[str, str]:
        source = ManifestReader(self.package_dir / self.config.manifest)
        installed = ManifestReader(self.installed_dir / self.config.manifest)
        return source.version, installed.version

    def _run_subprocess(self, command: str, cwd: Path) -> str:
        logger.info(f"Running command: {command}")
        try:
            result = subprocess.run(
                command,
                shell=True,
                capture_output=True,
                text=True,
                cwd=cwd,
                check=False,
            )
        except OSError as e:
            raise BuildError(f"Unable to run build command '{command}': {e}") from e
        if result.returncode != 0:
            error_message = (
                f"Command failed with exit code {result.returncode}.\n"
                f"  Command: {command}\n"
                f"  Stdout:\n{result.stdout.strip()}\n"
                f"  Stderr:\n{result.stderr.strip()}"
            )
            raise BuildError(error_message)
        if result.stderr:
            logger.debug("Command stderr", output=result.stderr.strip())
        return result.stdout.strip()

    def run_build(self) -> None:
        if not self.package_dir.is_dir():
            raise BuildError(f"Package directory not found: {self.package_dir}")
        try:
            self._run_subprocess(self.config.build_script, cwd=self.package_dir)
        except BuildError as e:
            raise BuildError(f"Build failed: {e}") from e
        if not self.dist_dir.is_dir():
            raise BuildError(f"Dist folder not found after build: {self.dist_dir}")

    def fingerprint_trees(self) -> tuple[TreeFingerprint, TreeFingerprint]:
        source = fingerprint_tree(self.dist_dir, self.rules)
        installed = fingerprint_tree(self.installed_dir, self.rules)
        logger.info(
            "Generated checksums",
            package=self.config.name,
            source=source.combined,
            installed=installed.combined,
        )
        return source, installed

    @staticmethod
    def comparison_errors(comparison: ComparisonResult) -> list[str]:
        errors: list[str] = []
        if comparison.content_mismatches:
            errors.append(
                f"Checksum mismatch: {', '.join(comparison.content_mismatches)}"
            )
        if comparison.missing_in_target:
            errors.append(
                "Missing from installed package: "
                f"{', '.join(comparison.missing_in_target)}"
            )
        if not comparison.passed and not errors:
            errors.append("Checksums do not match - package may have been modified")
        return errors

    def audit(self) -> PackageReport:
        name = self.config.name
        logger.info(f"Auditing package '{name}'...")
        errors: list[str] = []
        details: dict[str, Any] = {}

        try:
            source_version, installed_version = self.check_versions()
            details.update(
                source_version=source_version, installed_version=installed_version
            )
            if source_version != installed_version:
                logger.warning(
                    "Version mismatch",
                    package=name,
                    source=source_version,
                    installed=installed_version,
                )
                errors.append(
                    f"Version mismatch: {source_version} vs {installed_version}"
                )

            self.run_build()
            source_fp, installed_fp = self.fingerprint_trees()
            comparison = compare(source_fp, installed_fp)
        except AuditError as e:
            logger.error("Package audit failed", package=name, reason=str(e))
            errors.append(str(e))
            return PackageReport(name=name, errors=errors, **details)
        except Exception as e:
            # Any other fault is confined to this package's report.
            logger.error(
                "Unexpected error during package audit",
                package=name,
                error=repr(e),
            )
            errors.append(f"Unexpected error while auditing {name}: {e!r}")
            return PackageReport(name=name, errors=errors, **details)

        errors.extend(self.comparison_errors(comparison))
        logger.info(
            "Comparison complete",
            package=name,
            verdict=comparison.verdict.value,
            passed=not errors,
        )
        return PackageReport(
            name=name,
            errors=errors,
            source_fingerprint=source_fp,
            installed_fingerprint=installed_fp,
            comparison=comparison,
            **details,
        )


def audit_packages(
    configs: Sequence[PackageConfig], root_dir: Path, jobs: int = 1
) -> AuditReport:
    """Audits every package independently; reports keep configuration order."""
    auditors = [PackageAuditor(config, root_dir) for config in configs]
    if jobs <= 1 or len(auditors) <= 1:
        return AuditReport(packages=[a.audit() for a in auditors])

    with ThreadPoolExecutor(max_workers=jobs) as executor:
        reports = list(executor.map(PackageAuditor.audit, auditors))
    return AuditReport(packages=reports)
