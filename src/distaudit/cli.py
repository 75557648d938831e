"""The `distaudit` command-line interface."""

import importlib.metadata
from pathlib import Path

import click

from .config import DEFAULT_CONFIG_NAME, load_config
from .exceptions import ConfigError, FingerprintError
from .fingerprint import compare, compile_patterns, fingerprint_tree
from .fingerprint.patterns import GLOB, WILDCARD
from .packaging.auditor import audit_packages
from .reporting import (
    EXIT_FAILED,
    EXIT_PASSED,
    exit_status,
    render_comparison,
    render_fingerprint,
    render_json,
    render_report,
)

try:
    __version__ = importlib.metadata.version("distaudit")
except importlib.metadata.PackageNotFoundError:
    __version__ = "0.0.0-dev"


def _ignore_options(func):
    func = click.option(
        "--glob",
        "use_glob",
        is_flag=True,
        help="Interpret ignore patterns as fnmatch globs (`?`, `[...]`).",
    )(func)
    func = click.option(
        "--ignore",
        "ignore_patterns",
        multiple=True,
        help="Pattern of files or directories to exclude. Repeatable.",
    )(func)
    return func


@click.group(context_settings=dict(help_option_names=["-h", "--help"]))
@click.version_option(
    __version__,
    "-V",
    "--version",
    prog_name="distaudit",
    message="%(prog)s version %(version)s",
)
def cli() -> None:
    """Reproducible-build integrity checker for published packages."""
    pass


@cli.command("check")
@click.option(
    "--config",
    "config_path",
    default=DEFAULT_CONFIG_NAME,
    type=click.Path(dir_okay=False, resolve_path=True),
    help="Path to the package configuration (JSON or pyproject.toml).",
)
@click.option(
    "--root",
    "root_dir",
    type=click.Path(exists=True, file_okay=False, resolve_path=True),
    help="Directory package paths are relative to. Defaults to the config's directory.",
)
@click.option(
    "--package",
    "package_names",
    multiple=True,
    help="Only audit the named package. Repeatable.",
)
@click.option(
    "--jobs",
    default=1,
    type=click.IntRange(min=1),
    help="Number of packages to audit concurrently.",
)
@click.option("--json", "as_json", is_flag=True, help="Emit the report as JSON.")
@click.pass_context
def check_command(
    ctx: click.Context,
    config_path: str,
    root_dir: str | None,
    package_names: tuple[str, ...],
    jobs: int,
    as_json: bool,
) -> None:
    """Rebuilds every configured package and compares it to its installed copy."""
    if not as_json:
        click.secho("\n🔍 Package Integrity Check", fg="green", bold=True)
        click.secho("━" * 60, fg="green")

    config_file = Path(config_path)
    try:
        configs = load_config(config_file)
    except ConfigError as e:
        click.secho(f"❌ {e}", fg="red", err=True)
        raise click.Abort() from e

    if package_names:
        known = {c.name for c in configs}
        unknown = [name for name in package_names if name not in known]
        if unknown:
            raise click.UsageError(
                f"Unknown package(s): {', '.join(unknown)}. "
                f"Configured: {', '.join(sorted(known))}"
            )
        configs = [c for c in configs if c.name in package_names]

    root = Path(root_dir) if root_dir else config_file.parent
    report = audit_packages(configs, root, jobs=jobs)

    if as_json:
        render_json(report.to_dict())
    else:
        render_report(report)
    ctx.exit(exit_status(report))


@cli.command("fingerprint")
@click.argument(
    "directory",
    type=click.Path(exists=True, file_okay=False, resolve_path=True),
)
@_ignore_options
@click.option("--json", "as_json", is_flag=True, help="Emit the fingerprint as JSON.")
def fingerprint_command(
    directory: str,
    ignore_patterns: tuple[str, ...],
    use_glob: bool,
    as_json: bool,
) -> None:
    """Prints the per-file and combined checksums of a directory."""
    rules = compile_patterns(ignore_patterns, GLOB if use_glob else WILDCARD)
    try:
        fingerprint = fingerprint_tree(Path(directory), rules)
    except FingerprintError as e:
        click.secho(f"❌ Fingerprinting failed: {e}", fg="red", err=True)
        raise click.Abort() from e

    if as_json:
        render_json(fingerprint.to_dict())
    else:
        render_fingerprint(fingerprint)


@cli.command("compare")
@click.argument("source", type=click.Path(file_okay=False, resolve_path=True))
@click.argument("installed", type=click.Path(file_okay=False, resolve_path=True))
@_ignore_options
@click.option("--json", "as_json", is_flag=True, help="Emit the comparison as JSON.")
@click.pass_context
def compare_command(
    ctx: click.Context,
    source: str,
    installed: str,
    ignore_patterns: tuple[str, ...],
    use_glob: bool,
    as_json: bool,
) -> None:
    """Compares two directories without running any build."""
    rules = compile_patterns(ignore_patterns, GLOB if use_glob else WILDCARD)
    try:
        source_fp = fingerprint_tree(Path(source), rules)
        installed_fp = fingerprint_tree(Path(installed), rules)
    except FingerprintError as e:
        click.secho(f"❌ Fingerprinting failed: {e}", fg="red", err=True)
        raise click.Abort() from e

    comparison = compare(source_fp, installed_fp)
    if as_json:
        render_json(
            {
                "source": source_fp.to_dict(),
                "installed": installed_fp.to_dict(),
                "comparison": comparison.to_dict(),
            }
        )
    else:
        click.secho(f"     Source checksum:    {source_fp.combined}", fg="cyan")
        click.secho(f"     Installed checksum: {installed_fp.combined}", fg="cyan")
        render_comparison(comparison)
    ctx.exit(EXIT_PASSED if comparison.passed else EXIT_FAILED)


main = cli
