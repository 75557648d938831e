"""Tests for the per-package audit pipeline."""

import os
import sys
from pathlib import Path
from unittest.mock import patch

import pytest

from distaudit.models import PackageConfig, Verdict
from distaudit.packaging.auditor import PackageAuditor, audit_packages


def _config(name: str = "widget", **overrides) -> PackageConfig:
    settings = {
        "name": name,
        "path": f"packages/{name}",
        "dist": "dist",
        "build_script": "true",
        "ignore": ["package.json"],
    }
    settings.update(overrides)
    return PackageConfig(**settings)


def test_matching_package_passes(tmp_path: Path, make_workspace) -> None:
    root = make_workspace(tmp_path)
    report = PackageAuditor(_config(), root).audit()

    assert report.passed, report.errors
    assert report.source_version == report.installed_version == "1.0.0"
    assert report.comparison.verdict is Verdict.IDENTICAL
    assert report.source_fingerprint.combined == report.installed_fingerprint.combined


def test_installed_metadata_counts_as_extra(tmp_path: Path, make_workspace) -> None:
    root = make_workspace(tmp_path)
    report = PackageAuditor(_config(ignore=[]), root).audit()

    assert report.passed
    assert report.comparison.verdict is Verdict.EQUIVALENT_WITH_EXTRAS
    assert report.comparison.extra_in_target == ("package.json",)


def test_build_script_runs_in_package_dir(tmp_path: Path, make_workspace) -> None:
    root = make_workspace(tmp_path, dist_files={}, installed_files={"out.js": "built"})
    config = _config(build_script="mkdir -p dist && printf built > dist/out.js")
    report = PackageAuditor(config, root).audit()

    assert report.passed, report.errors
    assert (root / "packages/widget/dist/out.js").read_text() == "built"


def test_version_mismatch_is_reported_but_audit_continues(
    tmp_path: Path, make_workspace
) -> None:
    root = make_workspace(tmp_path, installed_version="1.0.1")
    report = PackageAuditor(_config(), root).audit()

    assert not report.passed
    assert report.errors == ("Version mismatch: 1.0.0 vs 1.0.1",)
    assert report.comparison is not None
    assert report.comparison.verdict is Verdict.IDENTICAL


def test_missing_installed_manifest_fails_early(tmp_path: Path, make_workspace) -> None:
    root = make_workspace(tmp_path)
    (root / "node_modules/widget/package.json").unlink()

    with patch.object(PackageAuditor, "run_build") as mock_build:
        report = PackageAuditor(_config(), root).audit()

    mock_build.assert_not_called()
    assert not report.passed
    assert "Manifest not found" in report.errors[0]
    assert report.comparison is None


def test_build_failure_stops_the_audit(tmp_path: Path, make_workspace) -> None:
    root = make_workspace(tmp_path)
    config = _config(build_script="echo compiling; echo boom >&2; exit 3")
    report = PackageAuditor(config, root).audit()

    assert not report.passed
    assert report.source_version == "1.0.0"
    assert report.source_fingerprint is None
    (error,) = report.errors
    assert error.startswith("Build failed: Command failed with exit code 3.")
    assert "boom" in error


def test_missing_dist_after_build(tmp_path: Path, make_workspace) -> None:
    root = make_workspace(tmp_path)
    report = PackageAuditor(_config(dist="build"), root).audit()

    assert not report.passed
    assert "Dist folder not found after build" in report.errors[0]


def test_content_mismatch_and_missing_files_fail(tmp_path: Path, make_workspace) -> None:
    root = make_workspace(
        tmp_path,
        dist_files={"a.js": "A", "b.js": "B", "c.js": "C"},
        installed_files={"a.js": "tampered", "b.js": "B"},
    )
    report = PackageAuditor(_config(), root).audit()

    assert not report.passed
    assert report.comparison.verdict is Verdict.MISMATCHED
    assert report.errors == (
        "Checksum mismatch: a.js",
        "Missing from installed package: c.js",
    )


def test_unreadable_file_fails_the_package(tmp_path: Path, make_workspace) -> None:
    root = make_workspace(tmp_path)
    os.symlink(tmp_path / "nowhere", root / "packages/widget/dist/broken.js")
    report = PackageAuditor(_config(), root).audit()

    assert not report.passed
    assert "Unable to read" in report.errors[0]
    assert report.comparison is None


def test_auditor_runs_build_through_subprocess(tmp_path: Path, make_workspace) -> None:
    root = make_workspace(tmp_path)
    with patch(
        "distaudit.packaging.auditor.PackageAuditor._run_subprocess"
    ) as mock_run:
        mock_run.return_value = ""
        PackageAuditor(_config(build_script="npm run build"), root).audit()

    mock_run.assert_called_once_with("npm run build", cwd=root / "packages/widget")


def test_audit_packages_is_independent_per_package(tmp_path: Path, make_workspace) -> None:
    root = make_workspace(tmp_path, name="good")
    make_workspace(tmp_path, name="bad", installed_files={"a.js": "A"})
    make_workspace(tmp_path, name="also-good")
    configs = [_config("good"), _config("bad"), _config("also-good")]

    for jobs in (1, 3):
        report = audit_packages(configs, root, jobs=jobs)
        assert [p.name for p in report.packages] == ["good", "bad", "also-good"]
        assert [p.passed for p in report.packages] == [True, False, True]
        assert not report.passed
        assert [p.name for p in report.failed] == ["bad"]


@pytest.mark.skipif(sys.platform != "linux", reason="needs byte file names")
def test_undecodable_file_name_does_not_stop_other_packages(
    tmp_path: Path, make_workspace
) -> None:
    name = os.fsdecode(b"x\xff.js")
    files = {"a.js": "A", name: "X"}
    root = make_workspace(tmp_path, name="bytes", dist_files=files, installed_files=files)
    make_workspace(tmp_path, name="good")
    configs = [_config("bytes"), _config("good")]

    for jobs in (1, 3):
        report = audit_packages(configs, root, jobs=jobs)
        assert [p.name for p in report.packages] == ["bytes", "good"]
        assert report.passed
        assert name in report.packages[0].source_fingerprint.file_list


def test_unexpected_error_is_confined_to_its_package(
    tmp_path: Path, make_workspace, monkeypatch
) -> None:
    root = make_workspace(tmp_path, name="good")
    make_workspace(tmp_path, name="bad")
    make_workspace(tmp_path, name="also-good")
    configs = [_config("good"), _config("bad"), _config("also-good")]
    original_run_build = PackageAuditor.run_build

    def flaky_run_build(self: PackageAuditor) -> None:
        if self.config.name == "bad":
            raise RuntimeError("disk on fire")
        original_run_build(self)

    monkeypatch.setattr(PackageAuditor, "run_build", flaky_run_build)

    for jobs in (1, 3):
        report = audit_packages(configs, root, jobs=jobs)
        assert [p.passed for p in report.packages] == [True, False, True]
        bad = report.packages[1]
        assert bad.errors == [
            "Unexpected error while auditing bad: RuntimeError('disk on fire')"
        ]
        assert bad.source_version == "1.0.0"
        assert bad.comparison is None
