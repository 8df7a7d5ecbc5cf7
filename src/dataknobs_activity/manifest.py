"""Activity manifests.

A manifest names an activity type and the two surfaces implementing it. Each
surface is given as an element name plus an ``entry`` of the form
``"package.module:ClassName"``.

Manifests are JSON or YAML files:

```yaml
id: oli_sample
friendlyName: Sample
description: A sample activity that asks for a single numeric answer
authoring:
  element: oli-sample-authoring
  entry: dataknobs_activity.authoring:AuthoringSurface
delivery:
  element: oli-sample-delivery
  entry: dataknobs_activity.delivery:DeliverySurface
```
"""

from __future__ import annotations

import importlib
import json
import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Dict, Union

import yaml

from dataknobs_activity.exceptions import ConfigurationError

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ElementEntry:
    """An element name and the import path of its implementation."""

    element: str
    entry: str

    def load(self) -> Any:
        """Import and return the object named by ``entry``.

        Raises:
            ConfigurationError: If the entry is malformed or cannot be imported
        """
        module_name, sep, attr = self.entry.partition(":")
        if not sep or not module_name or not attr:
            raise ConfigurationError(
                f"Entry must look like 'module:attribute': {self.entry!r}",
                context={"element": self.element, "entry": self.entry},
            )
        try:
            module = importlib.import_module(module_name)
            return getattr(module, attr)
        except (ImportError, AttributeError) as e:
            raise ConfigurationError(
                f"Cannot load entry {self.entry!r} for element {self.element!r}: {e}",
                context={"element": self.element, "entry": self.entry},
            ) from e

    def to_dict(self) -> Dict[str, Any]:
        return {"element": self.element, "entry": self.entry}


@dataclass(frozen=True)
class ActivityManifest:
    """Registration metadata for one activity type."""

    id: str
    friendly_name: str
    description: str
    authoring: ElementEntry
    delivery: ElementEntry

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "friendlyName": self.friendly_name,
            "description": self.description,
            "authoring": self.authoring.to_dict(),
            "delivery": self.delivery.to_dict(),
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> ActivityManifest:
        """Build a manifest from its dictionary form.

        Raises:
            ConfigurationError: If required keys are missing
        """
        if not isinstance(data, dict):
            raise ConfigurationError("Manifest must be a mapping", context={"type": type(data).__name__})

        missing = [key for key in ("id", "authoring", "delivery") if key not in data]
        for role in ("authoring", "delivery"):
            section = data.get(role)
            if role in data and not (
                isinstance(section, dict) and "element" in section and "entry" in section
            ):
                missing.append(f"{role}.element/{role}.entry")
        if missing:
            raise ConfigurationError(
                f"Manifest is missing required keys: {', '.join(missing)}",
                context={"missing": missing, "id": data.get("id")},
            )

        return cls(
            id=data["id"],
            friendly_name=data.get("friendlyName", data["id"]),
            description=data.get("description", ""),
            authoring=ElementEntry(**{k: data["authoring"][k] for k in ("element", "entry")}),
            delivery=ElementEntry(**{k: data["delivery"][k] for k in ("element", "entry")}),
        )


def load_manifest(path: Union[str, Path]) -> ActivityManifest:
    """Load a manifest from a ``.json``, ``.yaml`` or ``.yml`` file.

    Raises:
        ConfigurationError: If the file is missing, unparseable or incomplete
    """
    path = Path(path)
    if not path.exists():
        raise ConfigurationError(f"Manifest not found: {path}", context={"path": str(path)})

    text = path.read_text(encoding="utf-8")
    try:
        if path.suffix.lower() == ".json":
            data = json.loads(text)
        else:
            data = yaml.safe_load(text)
    except (json.JSONDecodeError, yaml.YAMLError) as e:
        raise ConfigurationError(
            f"Cannot parse manifest {path}: {e}", context={"path": str(path)}
        ) from e

    manifest = ActivityManifest.from_dict(data)
    logger.debug("Loaded manifest %s from %s", manifest.id, path)
    return manifest


SAMPLE_MANIFEST = ActivityManifest(
    id="oli_sample",
    friendly_name="Sample",
    description="A sample activity that asks for a single numeric answer",
    authoring=ElementEntry(
        element="oli-sample-authoring",
        entry="dataknobs_activity.authoring:AuthoringSurface",
    ),
    delivery=ElementEntry(
        element="oli-sample-delivery",
        entry="dataknobs_activity.delivery:DeliverySurface",
    ),
)


__all__ = ["ElementEntry", "ActivityManifest", "load_manifest", "SAMPLE_MANIFEST"]
