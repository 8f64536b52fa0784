"""Access-control rule model.

Example
-------
::

    from share_access.rules import AccessRule, Rights, RuleType, Inheritance

    rule = AccessRule("2025 Students", Rights.FULL_CONTROL, RuleType.DENY,
                      Inheritance.CONTAINER_AND_OBJECT)
"""
from __future__ import annotations

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

__all__ = [
    "AccessRule",
    "AccessState",
    "InheritScope",
    "Inheritance",
    "Rights",
    "RuleType",
    "SecurityDescriptor",
    "access_state",
]
