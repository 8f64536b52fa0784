"""In-process descriptor store.

Holds registered targets in a dict.  Useful for dry runs and tests; a path
can be marked read-only to make its write-back fail.

Example
-------
>>> store = InMemoryDescriptorStore()
>>> store.add_target("/shared/classA", is_container=True)
>>> len(store.read_descriptor("/shared/classA"))
0
"""
from __future__ import annotations

import threading
from dataclasses import dataclass, field

from share_access.errors import PathResolutionError, PersistenceError
from share_access.rules.models import SecurityDescriptor
from share_access.stores.base import DescriptorStore


@dataclass
class _Target:
    is_container: bool
    descriptor: SecurityDescriptor = field(default_factory=SecurityDescriptor)
    read_only: bool = False


class InMemoryDescriptorStore(DescriptorStore):
    """Dictionary-backed :class:`DescriptorStore`.

    Parameters
    ----------
    targets:
        Optional mapping of path to ``is_container`` flag to pre-register.
    """

    def __init__(self, targets: dict[str, bool] | None = None) -> None:
        self._targets: dict[str, _Target] = {}
        self._lock = threading.Lock()
        self.write_count = 0
        for path, is_container in (targets or {}).items():
            self.add_target(path, is_container=is_container)

    def add_target(
        self,
        path: str,
        is_container: bool = False,
        descriptor: SecurityDescriptor | None = None,
        read_only: bool = False,
    ) -> None:
        """Register *path* with an optional starting descriptor."""
        with self._lock:
            self._targets[path] = _Target(
                is_container=is_container,
                descriptor=(descriptor or SecurityDescriptor()).copy(),
                read_only=read_only,
            )

    def set_read_only(self, path: str, read_only: bool = True) -> None:
        """Make writes to *path* fail with :class:`PersistenceError`."""
        self._get(path).read_only = read_only

    # ------------------------------------------------------------------
    # DescriptorStore
    # ------------------------------------------------------------------

    def read_descriptor(self, path: str) -> SecurityDescriptor:
        return self._get(path).descriptor.copy()

    def write_descriptor(self, path: str, descriptor: SecurityDescriptor) -> None:
        with self._lock:
            target = self._targets.get(path)
            if target is None:
                raise PersistenceError(path, "path is not registered")
            if target.read_only:
                raise PersistenceError(path, "descriptor is read-only")
            target.descriptor = descriptor.copy()
            self.write_count += 1

    def is_container(self, path: str) -> bool:
        return self._get(path).is_container

    # ------------------------------------------------------------------
    # Internal helpers
    # ------------------------------------------------------------------

    def _get(self, path: str) -> _Target:
        with self._lock:
            target = self._targets.get(path)
        if target is None:
            raise PathResolutionError(path, "path is not registered")
        return target
