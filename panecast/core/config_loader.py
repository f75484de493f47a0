"""Config loading and validation for YAML-based panecast configs."""

from __future__ import annotations

import json
import logging
import os
from dataclasses import dataclass
from importlib import resources
from pathlib import Path
from typing import Any

import yaml
from jsonschema import ValidationError, validators

from panecast.core.errors import ConfigLoadError, ConfigValidationError
from panecast.core.model import BroadcastConfig
from panecast.core.options import build_config

CONFIG_ENV = "PANECAST_CONFIG"
_FLAG_KEYS = ("include_unmatched", "csi_u", "log")
_TARGET_FLAG_KEYS = ("enabled", "disable_submit_keys")
_YAML_BOOL_TAG = "tag:yaml.org,2002:bool"
_YAML_MERGE_TAG = "tag:yaml.org,2002:merge"
LOGGER = logging.getLogger(__name__)


class UniqueKeyLoader(yaml.SafeLoader):
    """Safe loader without implicit booleans that rejects duplicate mapping keys.

    yes/no/on/off stay strings here; flags go through _normalize_bool.
    """

    yaml_implicit_resolvers = {
        first_char: [(tag, regexp) for tag, regexp in resolvers if tag != _YAML_BOOL_TAG]
        for first_char, resolvers in yaml.SafeLoader.yaml_implicit_resolvers.items()
    }

    def construct_mapping(self, node: yaml.MappingNode, deep: bool = False) -> dict[Any, Any]:
        seen: list[Any] = []
        for key_node, _ in node.value:
            if key_node.tag == _YAML_MERGE_TAG:
                continue
            key = self.construct_object(key_node, deep=deep)
            if key in seen:
                raise ConfigValidationError(f"Duplicate key '{key}' in YAML document")
            seen.append(key)
        return super().construct_mapping(node, deep=deep)


@dataclass(frozen=True)
class LoadedConfig:
    config: BroadcastConfig
    warnings: tuple[str, ...]
    source: Path | None = None


def _load_schema_validator() -> Any:
    schema_text = resources.files("panecast.schemas").joinpath("config.schema.json").read_text(
        encoding="utf-8"
    )
    schema = json.loads(schema_text)
    validator_cls = validators.validator_for(schema)
    validator_cls.check_schema(schema)
    return validator_cls(schema)


def default_config_path() -> Path:
    override = os.environ.get(CONFIG_ENV)
    if override:
        return Path(override)
    xdg_config = Path(os.environ.get("XDG_CONFIG_HOME", Path.home() / ".config"))
    return xdg_config / "panecast/config.yaml"


def _read_yaml(path: Path) -> dict[str, Any]:
    try:
        content = path.read_text(encoding="utf-8")
    except OSError as exc:
        raise ConfigLoadError(f"Could not read config file {path}: {exc}") from exc

    try:
        loaded = yaml.load(content, Loader=UniqueKeyLoader)
    except yaml.YAMLError as exc:
        raise ConfigValidationError(f"Invalid YAML in {path}: {exc}") from exc

    if loaded is None:
        return {}
    if not isinstance(loaded, dict):
        raise ConfigValidationError(f"Config file {path} must contain a mapping at root")
    return loaded


def _normalize_bool(value: Any, *, context: str) -> bool:
    if isinstance(value, bool):
        return value
    if isinstance(value, str):
        lowered = value.strip().lower()
        if lowered in {"true", "yes", "on"}:
            return True
        if lowered in {"false", "no", "off"}:
            return False
    raise ConfigValidationError(f"{context} must be boolean true/false")


def _normalize_target(doc: dict[str, Any], index: int) -> dict[str, Any]:
    target = dict(doc)
    name = target.get("name", f"#{index}")
    for key in _TARGET_FLAG_KEYS:
        if key in target:
            target[key] = _normalize_bool(target[key], context=f"targets.{name}.{key}")
    if isinstance(target.get("submit_keys"), (bool, str)):
        target["submit_keys"] = _normalize_bool(
            target["submit_keys"], context=f"targets.{name}.submit_keys"
        )
        if target["submit_keys"] is True:
            # `submit_keys: true` means "use the defaults".
            del target["submit_keys"]
    return target


def parse_config(doc: dict[str, Any], source: Path | str = "<memory>") -> LoadedConfig:
    validator = _load_schema_validator()
    try:
        validator.validate(doc)
    except ValidationError as exc:
        path = ".".join(str(p) for p in exc.path)
        where = f" ({path})" if path else ""
        raise ConfigValidationError(f"Schema validation failed for {source}{where}: {exc.message}") from exc

    options = dict(doc)
    for key in _FLAG_KEYS:
        if key in options:
            options[key] = _normalize_bool(options[key], context=key)

    warnings: list[str] = []
    seen: set[str] = set()
    targets = []
    for index, target_doc in enumerate(options.get("targets") or ()):
        target = _normalize_target(target_doc, index)
        if target["name"] in seen:
            warning = f"Target '{target['name']}' is defined more than once in {source}"
            LOGGER.warning(warning)
            warnings.append(warning)
        seen.add(target["name"])
        targets.append(target)
    options["targets"] = targets

    return LoadedConfig(
        config=build_config(options),
        warnings=tuple(warnings),
        source=Path(source) if isinstance(source, Path) else None,
    )


def load_config(path: Path | str | None = None) -> LoadedConfig:
    """Load the config at `path`, or the default location if no path is given.

    A missing default config yields the built-in defaults; a missing explicit
    path is an error.
    """
    if path is None:
        config_path = default_config_path()
        if not config_path.exists():
            return LoadedConfig(config=BroadcastConfig(), warnings=())
    else:
        config_path = Path(path)
        if not config_path.exists():
            raise ConfigLoadError(f"Config file {config_path} does not exist")

    return parse_config(_read_yaml(config_path), config_path)
