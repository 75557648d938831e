"""Loading of the package audit configuration from JSON or pyproject.toml."""

import json
from pathlib import Path
import tomllib
from typing import Any

from .exceptions import ConfigError
from .fingerprint.patterns import SYNTAXES, WILDCARD
from .models import DEFAULT_MANIFEST_NAME, PackageConfig

DEFAULT_CONFIG_NAME = "config.json"

# Config key -> PackageConfig field. camelCase keys come from JSON configs.
_KEY_ALIASES = {
    "buildScript": "build_script",
    "ignoreSyntax": "ignore_syntax",
}
_REQUIRED = ("path", "dist", "build_script")
_OPTIONAL_STRINGS = ("installed", "manifest", "ignore_syntax")


def _read_raw(config_path: Path) -> dict[str, Any]:
    if not config_path.is_file():
        raise ConfigError(f"{config_path.name} not found: {config_path}")

    if config_path.suffix == ".toml":
        try:
            with config_path.open("rb") as f:
                data = tomllib.load(f)
        except (OSError, tomllib.TOMLDecodeError) as e:
            raise ConfigError(f"Unable to parse {config_path}: {e}") from e
        packages = data.get("tool", {}).get("distaudit", {}).get("packages")
        if packages is None:
            raise ConfigError(
                "A [tool.distaudit.packages] table was not found in "
                f"{config_path.name}."
            )
    else:
        try:
            packages = json.loads(config_path.read_text(encoding="utf-8"))
        except (OSError, UnicodeDecodeError, json.JSONDecodeError) as e:
            raise ConfigError(f"Unable to parse {config_path}: {e}") from e

    if not isinstance(packages, dict):
        raise ConfigError(
            f"{config_path.name} must map package names to package settings."
        )
    return packages


def parse_package(name: str, raw: Any) -> PackageConfig:
    if not isinstance(raw, dict):
        raise ConfigError(f"Package '{name}': settings must be an object.")

    settings = {_KEY_ALIASES.get(key, key): value for key, value in raw.items()}

    for key in _REQUIRED:
        value = settings.get(key)
        if not isinstance(value, str) or not value:
            raise ConfigError(f"Package '{name}': '{key}' must be a non-empty string.")

    for key in _OPTIONAL_STRINGS:
        if key in settings and not isinstance(settings[key], str):
            raise ConfigError(f"Package '{name}': '{key}' must be a string.")

    ignore = settings.get("ignore", [])
    if not isinstance(ignore, list) or not all(isinstance(p, str) for p in ignore):
        raise ConfigError(f"Package '{name}': 'ignore' must be a list of strings.")

    ignore_syntax = settings.get("ignore_syntax", WILDCARD)
    if ignore_syntax not in SYNTAXES:
        raise ConfigError(
            f"Package '{name}': unknown ignore_syntax '{ignore_syntax}'. "
            f"Expected one of: {', '.join(SYNTAXES)}."
        )

    return PackageConfig(
        name=name,
        path=settings["path"],
        dist=settings["dist"],
        build_script=settings["build_script"],
        ignore=ignore,
        ignore_syntax=ignore_syntax,
        installed=settings.get("installed"),
        manifest=settings.get("manifest", DEFAULT_MANIFEST_NAME),
    )


def load_config(config_path: Path) -> list[PackageConfig]:
    """Reads every package entry from *config_path*, keeping file order."""
    packages = _read_raw(config_path)
    return [parse_package(name, raw) for name, raw in packages.items()]
