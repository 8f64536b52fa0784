"""Descriptor stores: the read/write collaborator behind the rule manager."""
from __future__ import annotations

from share_access.stores.base import DescriptorStore
from share_access.stores.memory import InMemoryDescriptorStore
from share_access.stores.yaml_store import YamlDescriptorStore

__all__ = [
    "DescriptorStore",
    "InMemoryDescriptorStore",
    "YamlDescriptorStore",
]
