"""
Build configuration.

Options are read from YAML, either the packaged `configs/build.yaml` or a
user-supplied file, and validated into a frozen `BuildOptions`.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field, replace
from pathlib import Path
from typing import Any, Dict, Optional, Tuple, Union

import yaml

from rigretarget.processing.armature import SHALLOW_POLICIES
from rigretarget.resolution.strategies import STRATEGY_ORDER

logger = logging.getLogger(__name__)

DEFAULT_CONFIG_PATH = Path(__file__).parent.resolve() / "configs" / "build.yaml"

CONFIG_KEYS = (
    "strategies",
    "keep_disabled_after_build",
    "shallow_armature_policy",
    "strip_leading_segments",
)


class ConfigError(ValueError):
    """Raised when a configuration value is not recognized."""

    pass


@dataclass(frozen=True)
class BuildOptions:
    strategies: Tuple[str, ...] = field(default_factory=lambda: tuple(STRATEGY_ORDER))
    keep_disabled_after_build: bool = False
    shallow_armature_policy: str = "warn"
    strip_leading_segments: Tuple[str, ...] = ()

    def __post_init__(self):
        unknown = [s for s in self.strategies if s not in STRATEGY_ORDER]
        if unknown:
            raise ConfigError(
                f"Unknown strategies {unknown}; expected a subset of {STRATEGY_ORDER}"
            )
        if self.shallow_armature_policy not in SHALLOW_POLICIES:
            raise ConfigError(
                f"Unknown shallow_armature_policy '{self.shallow_armature_policy}'; "
                f"expected one of {list(SHALLOW_POLICIES)}"
            )

    def without_strategies(self, names) -> "BuildOptions":
        """Returns a copy with the given strategies switched off."""
        names = set(names or ())
        unknown = names - set(STRATEGY_ORDER)
        if unknown:
            raise ConfigError(f"Unknown strategies {sorted(unknown)}")
        return replace(
            self, strategies=tuple(s for s in self.strategies if s not in names)
        )


def load_config_dict(path: Optional[Union[str, Path]] = None) -> Dict[str, Any]:
    """Loads a YAML config file, the packaged default if no path is given."""
    config_path = Path(path) if path is not None else DEFAULT_CONFIG_PATH
    if not config_path.exists():
        raise FileNotFoundError(f"Config file not found: {config_path}")

    logger.info(f"Loading configuration from {config_path}...")
    with open(config_path) as f:
        try:
            data = yaml.safe_load(f)
        except yaml.YAMLError as e:
            logger.error(f"Error parsing YAML file {config_path}: {e}")
            raise
    if data is None:
        return {}
    if not isinstance(data, dict):
        raise ConfigError(f"Config file {config_path} must contain a mapping")
    return data


def _string_list(data: Dict[str, Any], key: str) -> Optional[Tuple[str, ...]]:
    value = data.get(key)
    if value is None:
        return None
    if not isinstance(value, list) or not all(isinstance(v, str) for v in value):
        raise ConfigError(f"'{key}' must be a list of strings, got {value!r}")
    return tuple(value)


def options_from_dict(data: Dict[str, Any]) -> BuildOptions:
    """
    Validates a config mapping into `BuildOptions`.

    Missing keys keep their defaults. Values must have the YAML type of the
    packaged config: a quoted "false" is rejected rather than read as true.

    Raises:
        ConfigError: On a wrongly typed value or an unknown strategy or policy.
    """
    for key in data:
        if key not in CONFIG_KEYS:
            logger.warning(f"Ignoring unknown config key '{key}'")

    defaults = BuildOptions()
    strategies = _string_list(data, "strategies")
    strip = _string_list(data, "strip_leading_segments")

    keep_disabled = data.get("keep_disabled_after_build", defaults.keep_disabled_after_build)
    if not isinstance(keep_disabled, bool):
        raise ConfigError(
            f"'keep_disabled_after_build' must be true or false, got {keep_disabled!r}"
        )
    policy = data.get("shallow_armature_policy", defaults.shallow_armature_policy)
    if not isinstance(policy, str):
        raise ConfigError(f"'shallow_armature_policy' must be a string, got {policy!r}")

    return BuildOptions(
        strategies=strategies if strategies is not None else defaults.strategies,
        keep_disabled_after_build=keep_disabled,
        shallow_armature_policy=policy,
        strip_leading_segments=strip or (),
    )


def load_config(path: Optional[Union[str, Path]] = None) -> BuildOptions:
    """
    Loads build options from YAML.

    Args:
        path: A config file. The packaged default is used if None.

    Returns:
        The validated `BuildOptions`.

    Raises:
        ConfigError: If a strategy or policy name is not recognized.
        yaml.YAMLError: If the file is not valid YAML.
    """
    return options_from_dict(load_config_dict(path))
