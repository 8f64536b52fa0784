"""Abstract contract for the OS access-control collaborator.

The rule manager never touches a filesystem ACL directly.  It reads and
writes whole :class:`~share_access.rules.models.SecurityDescriptor` objects
through a :class:`DescriptorStore`, and asks the store whether a path is a
container (folder) or a leaf (file).
"""
from __future__ import annotations

from abc import ABC, abstractmethod

from share_access.rules.models import SecurityDescriptor


class DescriptorStore(ABC):
    """Read/write access to per-path security descriptors.

    Implementations return a fresh, caller-owned descriptor from
    :meth:`read_descriptor`; mutating it has no effect until it is passed
    to :meth:`write_descriptor`.
    """

    @abstractmethod
    def read_descriptor(self, path: str) -> SecurityDescriptor:
        """Return the current descriptor for *path*.

        Raises
        ------
        PathResolutionError
            If the path cannot be resolved or its rules cannot be read.
        """

    @abstractmethod
    def write_descriptor(self, path: str, descriptor: SecurityDescriptor) -> None:
        """Persist *descriptor* as the complete rule set for *path*.

        Raises
        ------
        PersistenceError
            If the descriptor cannot be written.
        """

    @abstractmethod
    def is_container(self, path: str) -> bool:
        """Return ``True`` when *path* is a folder rather than a file."""
