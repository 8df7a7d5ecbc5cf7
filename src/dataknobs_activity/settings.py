"""Settings for hosting the sample activity.

Settings come from a YAML file or a dictionary, and any field can be
overridden with a ``DATAKNOBS_ACTIVITY_<FIELD>`` environment variable:

```bash
export DATAKNOBS_ACTIVITY_DEFAULT_STEM="What is three plus three?"
export DATAKNOBS_ACTIVITY_DEFAULT_CORRECT=6
export DATAKNOBS_ACTIVITY_LOG_LEVEL=DEBUG
```
"""

from __future__ import annotations

import logging
import os
from dataclasses import dataclass, fields, replace
from pathlib import Path
from typing import Any, Dict, Mapping, Union

import yaml

from dataknobs_activity.creation import DEFAULT_CORRECT, DEFAULT_STEM, make_creation_function
from dataknobs_activity.exceptions import ConfigurationError
from dataknobs_activity.manifest import SAMPLE_MANIFEST, ActivityManifest, load_manifest
from dataknobs_activity.registry import CreationFunction

ENV_PREFIX = "DATAKNOBS_ACTIVITY_"

# Never coerced from environment strings
_TEXT_SETTINGS = {"manifest_path", "default_stem", "log_level"}


def _parse_value(value: str) -> Any:
    """Coerce an environment string to bool, int, float or str."""
    if value.lower() in ("true", "yes"):
        return True
    if value.lower() in ("false", "no"):
        return False

    try:
        return int(value)
    except ValueError:
        pass

    try:
        return float(value)
    except ValueError:
        pass

    return value


@dataclass(frozen=True)
class ActivitySettings:
    """Settings for registering and hosting the activity.

    Attributes:
        manifest_path: Manifest file to load; the bundled sample manifest is
            used when unset
        default_stem: Stem of newly created models
        default_correct: Correct answer of newly created models
        log_level: Level for the ``dataknobs_activity`` logger
    """

    manifest_path: str | None = None
    default_stem: str = DEFAULT_STEM
    default_correct: Union[int, float, str] = DEFAULT_CORRECT
    log_level: str = "WARNING"

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> ActivitySettings:
        """Build settings from a mapping.

        Raises:
            ConfigurationError: If the mapping contains unknown keys
        """
        known = {f.name for f in fields(cls)}
        unknown = sorted(set(data) - known)
        if unknown:
            raise ConfigurationError(
                f"Unknown activity settings: {', '.join(unknown)}",
                context={"unknown": unknown, "known": sorted(known)},
            )
        return cls(**dict(data))

    @classmethod
    def from_yaml(cls, path: Union[str, Path]) -> ActivitySettings:
        """Load settings from a YAML file.

        Raises:
            ConfigurationError: If the file is missing or not a mapping
        """
        path = Path(path)
        if not path.exists():
            raise ConfigurationError(f"Settings file not found: {path}", context={"path": str(path)})
        try:
            data = yaml.safe_load(path.read_text(encoding="utf-8")) or {}
        except yaml.YAMLError as e:
            raise ConfigurationError(
                f"Cannot parse settings {path}: {e}", context={"path": str(path)}
            ) from e
        if not isinstance(data, dict):
            raise ConfigurationError(
                f"Settings file must contain a mapping: {path}", context={"path": str(path)}
            )
        return cls.from_dict(data)

    def with_env_overrides(self, environ: Mapping[str, str] | None = None) -> ActivitySettings:
        """Return a copy with ``DATAKNOBS_ACTIVITY_*`` variables applied.

        Variables that name no setting are ignored.
        """
        environ = os.environ if environ is None else environ
        known = {f.name for f in fields(self)}
        overrides: Dict[str, Any] = {}

        for key, value in environ.items():
            if not key.startswith(ENV_PREFIX):
                continue
            name = key[len(ENV_PREFIX):].lower()
            if name not in known:
                continue
            overrides[name] = value if name in _TEXT_SETTINGS else _parse_value(value)

        return replace(self, **overrides) if overrides else self

    def load_manifest(self) -> ActivityManifest:
        """The configured manifest, or the sample manifest."""
        if self.manifest_path is None:
            return SAMPLE_MANIFEST
        return load_manifest(self.manifest_path)

    def creation_function(self) -> CreationFunction:
        """A creation function producing models with the configured defaults."""
        return make_creation_function(self.default_stem, self.default_correct)


def configure_logging(settings: ActivitySettings) -> None:
    """Apply ``settings.log_level`` to the package logger.

    Raises:
        ConfigurationError: If the level name is not a logging level
    """
    level = logging.getLevelName(settings.log_level.upper())
    if not isinstance(level, int):
        raise ConfigurationError(
            f"Unknown log level: {settings.log_level}",
            context={"log_level": settings.log_level},
        )
    logging.getLogger("dataknobs_activity").setLevel(level)


__all__ = ["ENV_PREFIX", "ActivitySettings", "configure_logging"]
