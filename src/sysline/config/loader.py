"""Layered configuration for sysline writers.

Each layer is a plain mapping shaped like :data:`~sysline.config.schema.DEFAULT_CONFIG`
(``destination``, ``priority``, ``identity``, ``tls``, ``local``, ``handler``).
Layers are merged section by section and only the final result is turned
into dataclasses, so a file may set ``destination.address`` while the
environment overrides just ``priority.facility``.
"""

from __future__ import annotations

import importlib
import json
import os
from pathlib import Path
from types import ModuleType
from typing import Any, Callable, Dict, List, Mapping, cast

from platformdirs import user_config_dir

from .schema import SyslineConfig, build_config, default_config

try:  # pragma: no cover
    import tomllib  # type: ignore[attr-defined]
except ModuleNotFoundError:  # pragma: no cover
    import tomli as tomllib  # type: ignore[no-redef]

try:  # pragma: no cover
    yaml_module = importlib.import_module("yaml")
except ModuleNotFoundError:  # pragma: no cover
    yaml_module = None

yaml: ModuleType | None = yaml_module


_APP_NAME = "sysline"
_ENV_PREFIX = "SYSLINE__"
_SECTION_FILES = ("sysline.toml", "sysline.yaml", "sysline.yml")

Layer = Dict[str, Any]


def _read_toml(path: Path) -> Layer:
    if not path.is_file():
        return {}
    with path.open("rb") as fh:
        return tomllib.load(fh)


def _read_yaml(path: Path) -> Layer:
    # YAML files are ignored unless the ``yaml`` extra is installed.
    if yaml is None or not path.is_file():
        return {}
    safe_load = getattr(yaml, "safe_load", None)
    if not callable(safe_load):
        return {}
    with path.open("r", encoding="utf-8") as fh:
        document = cast(Callable[[Any], Any], safe_load)(fh)
    if isinstance(document, Mapping):
        return {str(section): body for section, body in document.items()}
    return {}


def _read_section_file(path: Path) -> Layer:
    return _read_toml(path) if path.suffix == ".toml" else _read_yaml(path)


def _overlay(base: Layer, layer: Mapping[str, Any]) -> Layer:
    """Apply ``layer`` on top of ``base`` in place.

    Tables are merged key by key; anything else (including the
    ``local.candidates`` list) replaces the value below it wholesale.
    """

    for key, value in layer.items():
        below = base.get(key)
        if isinstance(value, Mapping) and isinstance(below, dict):
            _overlay(below, value)
        elif isinstance(value, Mapping):
            base[key] = _overlay(dict(below) if isinstance(below, Mapping) else {}, value)
        else:
            base[key] = value
    return base


def _from_directory(directory: Path) -> Layer:
    layer: Layer = {}
    if not directory.is_dir():
        return layer
    for filename in _SECTION_FILES:
        sections = _read_section_file(directory / filename)
        if sections:
            _overlay(layer, sections)
    return layer


def _from_user_dir() -> Layer:
    return _from_directory(Path(user_config_dir(_APP_NAME)))


def _from_working_dir() -> Layer:
    return _from_directory(Path.cwd())


def _from_pyproject() -> Layer:
    tool = _read_toml(Path("pyproject.toml")).get("tool", {})
    if not isinstance(tool, Mapping):
        return {}
    table = tool.get(_APP_NAME, {})
    if isinstance(table, Mapping):
        return {str(section): body for section, body in table.items()}
    return {}


def _parse_env_value(raw: str) -> Any:
    """Turn an environment string into the type the schema expects.

    ``SYSLINE__TLS__ENABLED=true`` becomes a bool, ports and timeouts become
    numbers and ``SYSLINE__LOCAL__CANDIDATES='["unix:/dev/log"]'`` is read
    as JSON. Everything else, facility names included, stays a trimmed string.
    """

    text = raw.strip()
    if text.lower() in {"true", "false"}:
        return text.lower() == "true"
    for number in (int, float):
        try:
            return number(text)
        except ValueError:
            continue
    if text[:1] in {"[", "{"}:
        try:
            return json.loads(text)
        except json.JSONDecodeError:
            pass
    return text


def _from_environment() -> Layer:
    # SYSLINE__DESTINATION__ADDRESS -> {"destination": {"address": ...}}
    layer: Layer = {}
    for name, raw in os.environ.items():
        if not name.startswith(_ENV_PREFIX):
            continue
        keys: List[str] = [part.lower() for part in name[len(_ENV_PREFIX) :].split("__")]
        section = layer
        for key in keys[:-1]:
            section = cast(Layer, section.setdefault(key, {}))
        section[keys[-1]] = _parse_env_value(raw)
    return layer


def load_configuration(overrides: Mapping[str, Any] | None = None) -> SyslineConfig:
    """Load configuration from supported sources in precedence order.

    Later sources win: user config directory, working directory files,
    ``[tool.sysline]`` in ``pyproject.toml``, ``SYSLINE__*`` environment
    variables, then ``overrides``.
    """

    merged = default_config()
    for layer in (
        _from_user_dir(),
        _from_working_dir(),
        _from_pyproject(),
        _from_environment(),
        overrides or {},
    ):
        if layer:
            _overlay(merged, layer)
    return build_config(merged)
