"""Console and JSON rendering of audit results, plus exit status mapping."""

from collections.abc import Sequence
import json
from typing import Any

import click

from .models import (
    AuditReport,
    ComparisonResult,
    PackageReport,
    TreeFingerprint,
    Verdict,
)

RULE_WIDTH = 60

EXIT_PASSED = 0
EXIT_FAILED = 1


def exit_status(report: AuditReport) -> int:
    return EXIT_PASSED if report.passed else EXIT_FAILED


def _printable(text: str) -> str:
    """Replaces undecodable file-name bytes with U+FFFD for display."""
    return text.encode("utf-8", "surrogateescape").decode("utf-8", "replace")


def _join_paths(paths: Sequence[str]) -> str:
    return ", ".join(_printable(path) for path in paths)


def render_json(payload: dict[str, Any]) -> None:
    # json escapes lone surrogates as \udcXX, so names survive unchanged.
    click.echo(json.dumps(payload, indent=2))


def render_fingerprint(fingerprint: TreeFingerprint) -> None:
    for rel_path in fingerprint.file_list:
        click.echo(f"{fingerprint.digests[rel_path]}  {_printable(rel_path)}")
    click.secho(
        f"Combined checksum ({len(fingerprint)} files): {fingerprint.combined}",
        fg="cyan",
    )


def render_comparison(comparison: ComparisonResult) -> None:
    if comparison.missing_in_target:
        click.secho(
            "  ⚠️  Files in source but not in installed: "
            f"{_join_paths(comparison.missing_in_target)}",
            fg="yellow",
        )
    if comparison.extra_in_target:
        click.secho(
            "  ⚠️  Files in installed but not in source: "
            f"{_join_paths(comparison.extra_in_target)}",
            fg="yellow",
        )
    if comparison.content_mismatches:
        click.secho(
            "  ❌ Checksum mismatch for files: "
            f"{_join_paths(comparison.content_mismatches)}",
            fg="red",
        )

    if comparison.verdict is Verdict.IDENTICAL:
        click.secho("  ✅ All checksums match! Package integrity verified ✓", fg="green")
    elif comparison.verdict is Verdict.EQUIVALENT_WITH_EXTRAS:
        click.secho(
            "  ⚠️  File contents match, but installed package has additional files",
            fg="yellow",
        )
        click.secho(
            "     This is usually expected (package managers may add metadata)",
            fg="yellow",
        )
    else:
        click.secho(
            "  ❌ Checksums do not match - package may have been modified!", fg="red"
        )


def render_package(package: PackageReport) -> None:
    click.echo("\n" + "=" * RULE_WIDTH)
    click.secho(f"📦 Checking: {package.name}", fg="cyan", bold=True)
    click.echo("=" * RULE_WIDTH)

    if package.source_version is not None:
        if package.source_version == package.installed_version:
            click.secho(f"  ✅ Version match: {package.source_version}", fg="green")
        else:
            click.secho(
                f"  ❌ Version mismatch! Source: {package.source_version}, "
                f"Installed: {package.installed_version}",
                fg="red",
            )

    if package.source_fingerprint and package.installed_fingerprint:
        click.secho(
            f"     Source dist checksum: {package.source_fingerprint.combined}",
            fg="cyan",
        )
        click.secho(
            f"     Installed checksum:   {package.installed_fingerprint.combined}",
            fg="cyan",
        )

    if package.comparison is not None:
        render_comparison(package.comparison)
    elif package.errors:
        click.secho(f"  ❌ {_printable(package.errors[-1])}", fg="red")


def render_summary(report: AuditReport) -> None:
    click.echo("\n" + "=" * RULE_WIDTH)
    click.secho("📊 Summary", fg="cyan", bold=True)
    click.echo("=" * RULE_WIDTH)

    for package in report.packages:
        if package.passed:
            click.secho(f"  ✅ {package.name}: PASSED", fg="green")
            continue
        click.secho(f"  ❌ {package.name}: FAILED", fg="red")
        for error in package.errors:
            click.secho(f"      - {_printable(error)}", fg="red")

    click.echo("\n" + "━" * RULE_WIDTH)
    if report.passed:
        click.secho("🎉 All packages passed integrity check!", fg="green", bold=True)
    else:
        click.secho("💥 Some packages failed integrity check!", fg="red", bold=True)


def render_report(report: AuditReport) -> None:
    for package in report.packages:
        render_package(package)
    render_summary(report)
