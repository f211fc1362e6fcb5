"""Values documents — loading, merging, --set overrides, CaCertsConfig construction."""

import copy
import os

import yaml

from catrust.errors import ConfigurationError
from catrust.pacts.types import CaCertsConfig
from catrust.core.constants import DEFAULT_VALUES, VALUES_KEY


def load_values(path: str) -> dict:
    """Load a YAML values file. Empty files yield {}."""
    if not os.path.exists(path):
        raise ConfigurationError(f"values file '{path}' not found")
    with open(path, encoding="utf-8") as f:
        try:
            values = yaml.safe_load(f) or {}
        except yaml.YAMLError as exc:
            raise ConfigurationError(f"values file '{path}' is not valid YAML: {exc}") from exc
    if not isinstance(values, dict):
        raise ConfigurationError(f"values file '{path}' must contain a mapping at top level")
    return values


def deep_merge(base: dict, overrides: dict) -> None:
    """Recursively merge overrides into base. None values delete keys."""
    for key, val in overrides.items():
        if val is None:
            base.pop(key, None)
        elif isinstance(val, dict) and isinstance(base.get(key), dict):
            deep_merge(base[key], val)
        else:
            base[key] = copy.deepcopy(val)


def parse_set(expr: str) -> dict:
    """Turn 'caCerts.enabled=true' into {'caCerts': {'enabled': True}}.

    The right-hand side is parsed as a YAML scalar, so true/false/null and
    numbers get their natural types.
    """
    path, sep, raw = expr.partition("=")
    keys = path.strip().split(".")
    if not sep or not all(keys):
        raise ConfigurationError(f"invalid --set expression '{expr}' (expected key.path=value)")
    try:
        value = yaml.safe_load(raw) if raw else ""
    except yaml.YAMLError as exc:
        raise ConfigurationError(f"invalid --set value in '{expr}': {exc}") from exc
    result: dict = {keys[-1]: value}
    for key in reversed(keys[:-1]):
        result = {key: result}
    return result


def merge_values(files: list[str] | None = None, sets: list[str] | None = None) -> dict:
    """Defaults, then each values file in order, then each --set in order."""
    values = copy.deepcopy(DEFAULT_VALUES)
    for path in files or []:
        deep_merge(values, load_values(path))
    for expr in sets or []:
        deep_merge(values, parse_set(expr))
    return values


def _string_field(block: dict, key: str) -> str | None:
    val = block.get(key)
    if val is None:
        return None
    if not isinstance(val, str):
        raise ConfigurationError(
            f"{VALUES_KEY}.{key} must be a string, got {type(val).__name__}")
    return val


def config_from_values(values: dict) -> CaCertsConfig:
    """Build a CaCertsConfig from the caCerts block of merged values.

    Only types are checked here; CaCertsConfig.validate() checks the rest.
    """
    block = values.get(VALUES_KEY) or {}
    if not isinstance(block, dict):
        raise ConfigurationError(f"{VALUES_KEY} must be a mapping")
    enabled = block.get("enabled", False)
    if not isinstance(enabled, bool):
        raise ConfigurationError(
            f"{VALUES_KEY}.enabled must be a boolean, got {type(enabled).__name__}")
    return CaCertsConfig(
        enabled=enabled,
        secret_name=_string_field(block, "secretName") or "",
        secret_key=_string_field(block, "secretKey") or None,
        mount_path=_string_field(block, "mountPath") or "",
        file_name=_string_field(block, "fileName") or "",
    )
