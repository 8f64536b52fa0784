"""Access-control rule and security descriptor value types.

An :class:`AccessRule` is one (identity, rights, type, inheritance) tuple.
A :class:`SecurityDescriptor` is the unordered set of rules attached to one
filesystem object.  Two rules are the *same rule* only when all four fields
match exactly.

The descriptor offers two removal styles that the rule manager relies on:

- :meth:`SecurityDescriptor.remove_rule_specific` removes an exact match
- :meth:`SecurityDescriptor.remove_first` matches on identity and type only

Example
-------
::

    descriptor = SecurityDescriptor()
    descriptor.set_rule(
        AccessRule("AllStudents", Rights.MODIFY, RuleType.ALLOW, Inheritance.NONE)
    )
    assert access_state(descriptor, "AllStudents") is AccessState.ALLOWED
"""
from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Iterable, Iterator


# ---------------------------------------------------------------------------
# Enumerations
# ---------------------------------------------------------------------------


class Rights(str, Enum):
    """Capability class granted or denied by a rule."""

    FULL_CONTROL = "FullControl"         # All operations
    MODIFY = "Modify"                    # Read, write, delete; no permission changes
    READ_AND_EXECUTE = "ReadAndExecute"  # Read and run; no write


class RuleType(str, Enum):
    """Whether a rule allows or denies its rights."""

    ALLOW = "Allow"
    DENY = "Deny"


class Inheritance(str, Enum):
    """How a rule propagates to an object's descendants."""

    NONE = "None"                                # This object only
    OBJECT_ONLY = "ObjectOnly"                   # Files directly contained
    CONTAINER_AND_OBJECT = "ContainerAndObject"  # All descendants


class InheritScope(str, Enum):
    """Propagation requested by an administrator when granting a folder."""

    ALL = "All"
    THIS_FOLDER = "ThisFolder"

    def to_inheritance(self) -> Inheritance:
        """Return the inheritance flags a container rule uses for this scope."""
        if self is InheritScope.THIS_FOLDER:
            return Inheritance.OBJECT_ONLY
        return Inheritance.CONTAINER_AND_OBJECT


class AccessState(str, Enum):
    """Combined rule state for one identity on one descriptor."""

    NO_RULE = "NoRule"
    ALLOWED = "Allowed"
    DENIED = "Denied"
    ALLOWED_AND_DENIED = "AllowedAndDenied"


# ---------------------------------------------------------------------------
# AccessRule
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class AccessRule:
    """Immutable access-control entry.

    Attributes
    ----------
    identity:
        Name of the user or group the rule applies to.
    rights:
        Rights level granted or denied.
    rule_type:
        ``Allow`` or ``Deny``.
    inheritance:
        Propagation of the rule to descendants.
    """

    identity: str
    rights: Rights
    rule_type: RuleType
    inheritance: Inheritance = Inheritance.NONE

    def __post_init__(self) -> None:
        if not self.identity:
            raise ValueError("AccessRule.identity must not be empty.")
        # Accept plain strings for the enum fields.
        object.__setattr__(self, "rights", Rights(self.rights))
        object.__setattr__(self, "rule_type", RuleType(self.rule_type))
        object.__setattr__(self, "inheritance", Inheritance(self.inheritance))

    @classmethod
    def from_dict(cls, data: dict[str, object]) -> AccessRule:
        """Build an AccessRule from a plain dictionary.

        Raises
        ------
        ValueError
            If *data* is not a mapping, or a field is missing or holds an
            unknown value.
        """
        if not isinstance(data, dict):
            raise ValueError(f"AccessRule must be a mapping, got {type(data).__name__}.")
        try:
            return cls(
                identity=str(data["identity"]),
                rights=Rights(data["rights"]),
                rule_type=RuleType(data["type"]),
                inheritance=Inheritance(data.get("inheritance", Inheritance.NONE.value)),
            )
        except KeyError as exc:
            raise ValueError(f"AccessRule is missing field {exc}.") from exc
        except TypeError as exc:
            raise ValueError(f"AccessRule has a malformed field: {exc}") from exc

    def to_dict(self) -> dict[str, str]:
        return {
            "identity": self.identity,
            "rights": self.rights.value,
            "type": self.rule_type.value,
            "inheritance": self.inheritance.value,
        }

    def describe(self) -> str:
        """Return a short label such as ``Deny FullControl (ContainerAndObject)``."""
        return f"{self.rule_type.value} {self.rights.value} ({self.inheritance.value})"

    def _sort_key(self) -> tuple[str, str, str, str]:
        return (
            self.identity,
            self.rule_type.value,
            self.rights.value,
            self.inheritance.value,
        )


# ---------------------------------------------------------------------------
# SecurityDescriptor
# ---------------------------------------------------------------------------


class SecurityDescriptor:
    """The set of access rules attached to one filesystem object.

    Equality ignores rule order.  :meth:`set_rule` keeps at most one rule
    per (identity, rule_type) pair; rules loaded from elsewhere are kept as
    they are.

    Parameters
    ----------
    rules:
        Initial rules, in the order they were read.
    """

    def __init__(self, rules: Iterable[AccessRule] | None = None) -> None:
        self._rules: list[AccessRule] = list(rules or [])

    # ------------------------------------------------------------------
    # Queries
    # ------------------------------------------------------------------

    @property
    def rules(self) -> tuple[AccessRule, ...]:
        """All rules, in insertion order."""
        return tuple(self._rules)

    def rules_for(self, identity: str) -> list[AccessRule]:
        """Return every rule that names *identity*."""
        return [r for r in self._rules if r.identity == identity]

    def find(self, identity: str, rule_type: RuleType) -> AccessRule | None:
        """Return the first rule matching identity and type, or ``None``."""
        for rule in self._rules:
            if rule.identity == identity and rule.rule_type is rule_type:
                return rule
        return None

    def identities(self) -> list[str]:
        """Return the distinct identities named by this descriptor."""
        seen: dict[str, None] = {}
        for rule in self._rules:
            seen.setdefault(rule.identity, None)
        return list(seen)

    # ------------------------------------------------------------------
    # Mutations
    # ------------------------------------------------------------------

    def set_rule(self, rule: AccessRule) -> None:
        """Replace every rule with the same identity and type by *rule*."""
        self._rules = [
            r
            for r in self._rules
            if not (r.identity == rule.identity and r.rule_type is rule.rule_type)
        ]
        self._rules.append(rule)

    def remove_rule_specific(self, rule: AccessRule) -> bool:
        """Remove the rule equal to *rule* in all four fields.

        Returns
        -------
        bool
            ``True`` when a rule was removed, ``False`` when none matched.
        """
        try:
            self._rules.remove(rule)
        except ValueError:
            return False
        return True

    def remove_first(self, identity: str, rule_type: RuleType) -> AccessRule | None:
        """Remove the first rule with this identity and type.

        Rights and inheritance are ignored when matching.

        Returns
        -------
        AccessRule | None
            The removed rule, or ``None`` when nothing matched.
        """
        found = self.find(identity, rule_type)
        if found is not None:
            self._rules.remove(found)
        return found

    # ------------------------------------------------------------------
    # Serialisation
    # ------------------------------------------------------------------

    def copy(self) -> SecurityDescriptor:
        return SecurityDescriptor(self._rules)

    def to_dict(self) -> dict[str, object]:
        return {"rules": [r.to_dict() for r in self._rules]}

    @classmethod
    def from_dict(cls, data: dict[str, object] | None) -> SecurityDescriptor:
        """Build a descriptor from :meth:`to_dict` output.

        Raises
        ------
        ValueError
            If the data is not a mapping with a list of valid rules.
        """
        if not data:
            return cls()
        if not isinstance(data, dict):
            raise ValueError("SecurityDescriptor data must be a mapping.")
        raw_rules = data.get("rules") or []
        if not isinstance(raw_rules, list):
            raise ValueError("SecurityDescriptor 'rules' must be a list.")
        return cls(AccessRule.from_dict(r) for r in raw_rules)

    # ------------------------------------------------------------------
    # Dunder helpers
    # ------------------------------------------------------------------

    def __iter__(self) -> Iterator[AccessRule]:
        return iter(self._rules)

    def __len__(self) -> int:
        return len(self._rules)

    def __contains__(self, rule: object) -> bool:
        return rule in self._rules

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, SecurityDescriptor):
            return NotImplemented
        return sorted(self._rules, key=AccessRule._sort_key) == sorted(
            other._rules, key=AccessRule._sort_key
        )

    def __repr__(self) -> str:
        return f"SecurityDescriptor(rules={self._rules!r})"


# ---------------------------------------------------------------------------
# State helper
# ---------------------------------------------------------------------------


def access_state(descriptor: SecurityDescriptor, identity: str) -> AccessState:
    """Return the combined Allow/Deny state of *identity* on *descriptor*."""
    allowed = descriptor.find(identity, RuleType.ALLOW) is not None
    denied = descriptor.find(identity, RuleType.DENY) is not None
    if allowed and denied:
        return AccessState.ALLOWED_AND_DENIED
    if denied:
        return AccessState.DENIED
    if allowed:
        return AccessState.ALLOWED
    return AccessState.NO_RULE
