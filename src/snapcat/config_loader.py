"""Load SnapConfig from snapcat.yaml / snapcat.toml and the environment.

Precedence, lowest first: defaults, config file, ``SNAPCAT_*`` environment
variables, explicit overrides (CLI).
"""

from __future__ import annotations

import os
from collections.abc import Mapping
from pathlib import Path

from snapcat._errors import ConfigError
from snapcat.config import SnapConfig

ENV_PREFIX = "SNAPCAT_"

_PATH_FIELDS = frozenset({"dist_dir", "manifest"})
_OPTIONAL_PATH_FIELDS = frozenset({"output"})
_INT_FIELDS = frozenset({"port"})
_FLOAT_FIELDS = frozenset({
    "navigation_timeout", "readiness_timeout", "warmup_delay",
    "server_startup_timeout",
})
_STR_FIELDS = frozenset({"identifier_field", "detail_prefix", "host", "base_url"})
_OPTIONAL_STR_FIELDS = frozenset({"browser_executable", "serve_command"})
_TUPLE_FIELDS = frozenset({"static_routes"})

# Fields settable from the environment (readiness is file-only)
_ENV_FIELDS = (
    _PATH_FIELDS | _OPTIONAL_PATH_FIELDS | _INT_FIELDS | _FLOAT_FIELDS
    | _STR_FIELDS | _OPTIONAL_STR_FIELDS | _TUPLE_FIELDS
)
_KNOWN_FIELDS = _ENV_FIELDS | {"readiness"}


def load_config(
    root: Path,
    *,
    environ: Mapping[str, str] | None = None,
    **overrides: object,
) -> SnapConfig:
    """Load SnapConfig for *root*, merging file, environment and overrides.

    ``None`` overrides are ignored so CLI flags that were not given do not
    mask file or environment values.

    Raises:
        ConfigError: If the config file is malformed or a value cannot be
            coerced to its field type.

    """
    env = os.environ if environ is None else environ
    merged: dict[str, object] = {}
    merged.update(_read_config_file(root))
    merged.update(_read_environment(env))
    merged.update({k: v for k, v in overrides.items() if v is not None})

    unknown = set(merged) - _KNOWN_FIELDS
    if unknown:
        msg = f"Unknown config keys: {', '.join(sorted(unknown))}"
        raise ConfigError(msg)

    values = {name: _coerce(name, value) for name, value in merged.items()}
    return SnapConfig(root=root, **values)  # type: ignore[arg-type]


def _read_config_file(root: Path) -> dict[str, object]:
    """Read snapcat config from yaml/toml if present. Returns empty dict otherwise."""
    for name in ("snapcat.yaml", "snapcat.yml"):
        path = root / name
        if path.is_file():
            return _parse_yaml(path)
    toml_path = root / "snapcat.toml"
    if toml_path.is_file():
        return _parse_toml(toml_path)
    return {}


def _parse_yaml(path: Path) -> dict[str, object]:
    import yaml

    try:
        data = yaml.safe_load(path.read_text(encoding="utf-8")) or {}
    except yaml.YAMLError as exc:
        msg = f"Invalid YAML in {path}: {exc}"
        raise ConfigError(msg) from exc
    if not isinstance(data, dict):
        msg = f"{path} must contain a mapping"
        raise ConfigError(msg)
    return _flatten_snapcat_section(data)


def _parse_toml(path: Path) -> dict[str, object]:
    import tomllib

    try:
        data = tomllib.loads(path.read_text(encoding="utf-8"))
    except tomllib.TOMLDecodeError as exc:
        msg = f"Invalid TOML in {path}: {exc}"
        raise ConfigError(msg) from exc
    return _flatten_snapcat_section(data)


def _flatten_snapcat_section(data: dict[str, object]) -> dict[str, object]:
    """Extract snapcat.* keys and known top-level keys into one mapping."""
    result: dict[str, object] = {}
    for k, v in data.items():
        if k != "snapcat" and k in _KNOWN_FIELDS:
            result[k] = v
    section = data.get("snapcat")
    if isinstance(section, dict):
        result.update(section)
    return result


def _read_environment(environ: Mapping[str, str]) -> dict[str, object]:
    result: dict[str, object] = {}
    for name in _ENV_FIELDS:
        raw = environ.get(ENV_PREFIX + name.upper())
        if raw is not None and raw != "":
            result[name] = raw
    return result


def _coerce(name: str, value: object) -> object:
    """Coerce a raw file/env/CLI value to the type of field *name*."""
    try:
        if name in _PATH_FIELDS or name in _OPTIONAL_PATH_FIELDS:
            return value if isinstance(value, Path) else Path(str(value))
        if name in _INT_FIELDS:
            if isinstance(value, bool):
                raise TypeError("bool is not a port")
            return int(value)  # type: ignore[call-overload]
        if name in _FLOAT_FIELDS:
            return float(value)  # type: ignore[arg-type]
        if name in _STR_FIELDS or name in _OPTIONAL_STR_FIELDS:
            return str(value)
        if name in _TUPLE_FIELDS:
            if isinstance(value, str):
                return tuple(p.strip() for p in value.split(",") if p.strip())
            return tuple(str(p) for p in value)  # type: ignore[union-attr]
        if name == "readiness":
            return _coerce_readiness(value)
    except (TypeError, ValueError) as exc:
        msg = f"Invalid value for {name!r}: {value!r}"
        raise ConfigError(msg) from exc
    return value


def _coerce_readiness(value: object) -> dict[str, dict[str, object]]:
    if not isinstance(value, dict):
        raise TypeError("readiness must be a mapping of route kind to predicate")
    result: dict[str, dict[str, object]] = {}
    for kind, spec in value.items():
        if isinstance(spec, str):
            spec = {"selector": spec}
        if not isinstance(spec, dict) or not spec.get("selector"):
            raise TypeError(f"readiness.{kind} needs a selector")
        result[str(kind).lower()] = {
            "selector": str(spec["selector"]),
            "non_empty": bool(spec.get("non_empty", True)),
        }
    return result
