"""share-access: grant, revoke, block, and unblock group access to shared files and folders.

Public API
----------
The stable public surface is everything exported from this module.
Anything inside submodules not re-exported here is considered private
and may change without notice.

Example
-------
>>> import share_access as sa
>>> store = sa.InMemoryDescriptorStore({"/shared/classA": True})
>>> manager = sa.AccessRuleManager(store)
>>> [u.state.value for u in manager.grant_access(["/shared/classA"])]
['Allowed']
"""
from __future__ import annotations

__version__: str = "0.1.0"

# ---------------------------------------------------------------------------
# Rules
# ---------------------------------------------------------------------------
from share_access.rules.models import (
    AccessRule,
    AccessState,
    Inheritance,
    InheritScope,
    Rights,
    RuleType,
    SecurityDescriptor,
    access_state,
)

# ---------------------------------------------------------------------------
# Errors
# ---------------------------------------------------------------------------
from share_access.errors import (
    ConfigError,
    PathResolutionError,
    PersistenceError,
    ShareAccessError,
)

# ---------------------------------------------------------------------------
# Stores and manager
# ---------------------------------------------------------------------------
from share_access.stores import (
    DescriptorStore,
    InMemoryDescriptorStore,
    YamlDescriptorStore,
)
from share_access.manager import DEFAULT_IDENTITY, AccessRuleManager, AccessUpdate

# ---------------------------------------------------------------------------
# Ambient
# ---------------------------------------------------------------------------
from share_access.audit.logger import AuditLogger
from share_access.config_loader import ConfigLoader, ShareAccessConfig
from share_access.identities import suggest_identities

__all__ = [
    "__version__",
    # Rules
    "AccessRule",
    "AccessState",
    "InheritScope",
    "Inheritance",
    "Rights",
    "RuleType",
    "SecurityDescriptor",
    "access_state",
    # Errors
    "ConfigError",
    "PathResolutionError",
    "PersistenceError",
    "ShareAccessError",
    # Stores and manager
    "AccessRuleManager",
    "AccessUpdate",
    "DEFAULT_IDENTITY",
    "DescriptorStore",
    "InMemoryDescriptorStore",
    "YamlDescriptorStore",
    # Ambient
    "AuditLogger",
    "ConfigLoader",
    "ShareAccessConfig",
    "suggest_identities",
]
