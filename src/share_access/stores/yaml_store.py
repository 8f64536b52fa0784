"""YAML-backed descriptor store for real filesystem paths.

Descriptors are kept in a single YAML document keyed by absolute path.
Only paths that exist on disk can be read or written, and the folder/file
distinction comes from the filesystem itself.

Schema
------
::

    version: "1"
    descriptors:
      /srv/shared/classA:
        rules:
          - identity: "AllStudents"
            rights: "Modify"
            type: "Allow"
            inheritance: "ObjectOnly"

Writes go to a temporary sibling file which then replaces the document, so
a failed write never leaves a truncated store behind.
"""
from __future__ import annotations

import logging
import tempfile
import threading
from pathlib import Path

import yaml

from share_access.errors import PathResolutionError, PersistenceError
from share_access.rules.models import SecurityDescriptor
from share_access.stores.base import DescriptorStore

logger = logging.getLogger(__name__)

_STORE_VERSION = "1"


class YamlDescriptorStore(DescriptorStore):
    """Persist descriptors for existing filesystem paths in one YAML file.

    Parameters
    ----------
    store_path:
        Location of the YAML document.  It is created on first write;
        parent directories are created automatically.
    """

    def __init__(self, store_path: str | Path) -> None:
        self._store_path = Path(store_path)
        self._lock = threading.Lock()

    @property
    def store_path(self) -> Path:
        """The filesystem path of the YAML document."""
        return self._store_path

    # ------------------------------------------------------------------
    # DescriptorStore
    # ------------------------------------------------------------------

    def read_descriptor(self, path: str) -> SecurityDescriptor:
        if not path.strip():
            raise PathResolutionError(path, "empty path")
        key = self._key(path)
        if not Path(key).exists():
            raise PathResolutionError(path, "path does not exist")
        try:
            with self._lock:
                document = self._load()
            return SecurityDescriptor.from_dict(document["descriptors"].get(key))
        except (OSError, yaml.YAMLError, ValueError) as exc:
            raise PathResolutionError(path, str(exc)) from exc

    def write_descriptor(self, path: str, descriptor: SecurityDescriptor) -> None:
        if not path.strip():
            raise PersistenceError(path, "empty path")
        key = self._key(path)
        if not Path(key).exists():
            raise PersistenceError(path, "path does not exist")
        try:
            with self._lock:
                document = self._load()
                if descriptor:
                    document["descriptors"][key] = descriptor.to_dict()
                else:
                    document["descriptors"].pop(key, None)
                self._dump(document)
        except (OSError, yaml.YAMLError, ValueError) as exc:
            raise PersistenceError(path, str(exc)) from exc
        logger.debug("Wrote %d rule(s) for %s to %s", len(descriptor), key, self._store_path)

    def is_container(self, path: str) -> bool:
        if not path.strip():
            raise PathResolutionError(path, "empty path")
        return Path(self._key(path)).is_dir()

    # ------------------------------------------------------------------
    # Additional queries
    # ------------------------------------------------------------------

    def stored_paths(self) -> list[str]:
        """Return every path that currently has at least one stored rule."""
        with self._lock:
            document = self._load()
        return sorted(document["descriptors"])

    # ------------------------------------------------------------------
    # Internal helpers
    # ------------------------------------------------------------------

    @staticmethod
    def _key(path: str) -> str:
        return str(Path(path).expanduser().resolve())

    def _load(self) -> dict[str, dict[str, object]]:
        """Read the YAML document; caller holds the lock."""
        if not self._store_path.exists():
            return {"version": _STORE_VERSION, "descriptors": {}}
        with self._store_path.open("r", encoding="utf-8") as fh:
            raw = yaml.safe_load(fh) or {}
        if not isinstance(raw, dict):
            raise ValueError(f"Descriptor store {self._store_path} must be a YAML mapping.")
        descriptors = raw.get("descriptors") or {}
        if not isinstance(descriptors, dict):
            raise ValueError(f"Descriptor store {self._store_path} 'descriptors' must be a mapping.")
        raw["descriptors"] = descriptors
        return raw

    def _dump(self, document: dict[str, object]) -> None:
        """Atomically replace the YAML document; caller holds the lock."""
        self._store_path.parent.mkdir(parents=True, exist_ok=True)
        fh = tempfile.NamedTemporaryFile(
            "w",
            encoding="utf-8",
            dir=self._store_path.parent,
            prefix=f".{self._store_path.name}.",
            suffix=".tmp",
            delete=False,
        )
        tmp_path = Path(fh.name)
        try:
            with fh:
                yaml.safe_dump(document, fh, default_flow_style=False, sort_keys=True)
            tmp_path.replace(self._store_path)
        except (OSError, yaml.YAMLError):
            tmp_path.unlink(missing_ok=True)
            raise
