"""Property store implementations.

Configuration and per-tenant watermarks share a single flat mapping of
string keys to string values. The YAML file store rewrites the whole file
on every change; runs are assumed to be serialized.
"""

from pathlib import Path
from typing import Any

import structlog
from ruamel.yaml import YAML

from .abc import PropertyStoreBase

logger: structlog.stdlib.BoundLogger = structlog.get_logger(__name__)


class InMemoryPropertyStore(PropertyStoreBase):
    """Property store backed by a dictionary."""

    def __init__(self, initial: dict[str, str] | None = None) -> None:
        """Initialize the store with optional initial properties."""
        self._properties: dict[str, str] = dict(initial or {})

    def get(self, key: str) -> str | None:
        """Get the value stored under a key."""
        return self._properties.get(key)

    def set(self, key: str, value: str) -> None:
        """Store a value under a key."""
        self._properties[key] = value

    def delete(self, key: str) -> None:
        """Remove a key if present."""
        self._properties.pop(key, None)

    def keys(self) -> list[str]:
        """List every stored key."""
        return list(self._properties)


def create_yaml_dumper() -> YAML:
    """Creates a YAML object for dumping a flat properties mapping."""
    yaml_dumper = YAML()
    yaml_dumper.default_flow_style = False
    yaml_dumper.width = 4096  # Keep long JSON values on one line

    def represent_str(dumper: Any, data: str) -> Any:
        """Quote every string so that numeric watermarks stay strings."""
        return dumper.represent_scalar("tag:yaml.org,2002:str", data, style="'")

    yaml_dumper.representer.add_representer(str, represent_str)  # type: ignore[attr-defined]
    return yaml_dumper


class YAMLFilePropertyStore(PropertyStoreBase):
    """Property store persisted as a flat YAML mapping on disk."""

    def __init__(self, path: Path) -> None:
        """Initialize the store for a YAML file, which need not exist yet."""
        self.path = path
        self._properties: dict[str, str] = self._load()

    def _load(self) -> dict[str, str]:
        if not self.path.exists():
            logger.debug("Property file does not exist yet", path=str(self.path))
            return {}
        yaml = YAML(typ="safe")
        with open(self.path, encoding="utf-8") as f:
            data = yaml.load(f)
        if data is None:
            return {}
        if not isinstance(data, dict):
            raise ValueError(f"Property file {self.path} must contain a mapping, got {type(data).__name__}")
        # Hand-edited files may hold unquoted numbers.
        return {str(key): str(value) for key, value in data.items() if value is not None}

    def _save(self) -> None:
        if self.path.parent != Path(""):
            self.path.parent.mkdir(parents=True, exist_ok=True)
        with open(self.path, "w", encoding="utf-8") as f:
            create_yaml_dumper().dump(dict(sorted(self._properties.items())), f)

    def get(self, key: str) -> str | None:
        """Get the value stored under a key."""
        return self._properties.get(key)

    def set(self, key: str, value: str) -> None:
        """Store a value under a key and persist the file."""
        self._properties[key] = value
        self._save()

    def delete(self, key: str) -> None:
        """Remove a key if present and persist the file."""
        if self._properties.pop(key, None) is not None:
            self._save()

    def keys(self) -> list[str]:
        """List every stored key."""
        return list(self._properties)
