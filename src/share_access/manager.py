"""Rule-mutation operations for folder and file access.

AccessRuleManager exposes four operations that share one pipeline: for each
path, read the descriptor from the store, compute the new rule set, write it
back, and return an :class:`AccessUpdate` describing the result.

- ``deny_access``   sets a Deny/FullControl rule (replaces any prior Deny)
- ``rescind_deny``  removes exactly that Deny rule, if present
- ``grant_access``  sets an Allow rule (replaces any prior Allow)
- ``revoke_access`` removes the Allow rule for an identity, whatever its rights

Allow and Deny rules for the same identity may coexist; the operating system
evaluates Deny first, so a blocked identity stays blocked until the Deny rule
is rescinded.

Processing is fail-fast: the first :class:`PathResolutionError` or
:class:`PersistenceError` aborts the invocation, and paths after the failing
one are left untouched.

Example
-------
::

    store = InMemoryDescriptorStore({"/shared/classA": True})
    manager = AccessRuleManager(store)
    manager.grant_access(["/shared/classA"], access=Rights.MODIFY)
    manager.deny_access(["/shared/classA"], identity="2025 Students")
"""
from __future__ import annotations

import logging
import os
from dataclasses import dataclass
from typing import TYPE_CHECKING, Callable, Iterable, Union

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
from share_access.stores.base import DescriptorStore

if TYPE_CHECKING:
    from share_access.audit.logger import AuditLogger

logger = logging.getLogger(__name__)

DEFAULT_IDENTITY = "AllStudents"

RESCIND_NOTICE = (
    "rescind_deny only removes a block added by deny_access for '{identity}'; "
    "it does not grant access. Use grant_access if '{identity}' needs access."
)

PathInput = Union[str, "os.PathLike[str]", object]

# A mutator edits the descriptor in place; the flag says whether the path is a folder.
_Mutator = Callable[[SecurityDescriptor, bool], None]


# ---------------------------------------------------------------------------
# AccessUpdate
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class AccessUpdate:
    """Result of one per-path mutation.

    Attributes
    ----------
    path:
        The path that was processed.
    is_container:
        Whether the store reported the path as a folder.
    operation:
        Name of the manager operation (e.g. ``"grant_access"``).
    identity:
        The identity the operation targeted.
    changed:
        ``False`` when the written descriptor equals the one that was read.
    descriptor:
        The descriptor as written back to the store.
    """

    path: str
    is_container: bool
    operation: str
    identity: str
    changed: bool
    descriptor: SecurityDescriptor

    @property
    def state(self) -> AccessState:
        """Access state of :attr:`identity` after the mutation."""
        return access_state(self.descriptor, self.identity)

    def to_dict(self) -> dict[str, object]:
        return {
            "path": self.path,
            "is_container": self.is_container,
            "operation": self.operation,
            "identity": self.identity,
            "changed": self.changed,
            "state": self.state.value,
            "rules": [r.describe() for r in self.descriptor.rules_for(self.identity)],
        }


# ---------------------------------------------------------------------------
# AccessRuleManager
# ---------------------------------------------------------------------------


class AccessRuleManager:
    """Grant, revoke, block, and unblock an identity's access to paths.

    Parameters
    ----------
    store:
        The descriptor store that reads and writes access rules.
    audit_logger:
        Optional audit logger.  When provided, every processed path is
        recorded in the audit trail.
    notice:
        Optional callback receiving advisory notices (currently only the
        one emitted by :meth:`rescind_deny`).  Without a callback, notices
        are logged at WARNING level.
    """

    def __init__(
        self,
        store: DescriptorStore,
        audit_logger: "AuditLogger | None" = None,
        notice: Callable[[str], None] | None = None,
    ) -> None:
        self._store = store
        self._audit_logger = audit_logger
        self._notice = notice

    @property
    def store(self) -> DescriptorStore:
        return self._store

    # ------------------------------------------------------------------
    # Rule templates
    # ------------------------------------------------------------------

    @staticmethod
    def deny_rule(identity: str) -> AccessRule:
        """Return the canonical blocking rule for *identity*."""
        return AccessRule(
            identity=identity,
            rights=Rights.FULL_CONTROL,
            rule_type=RuleType.DENY,
            inheritance=Inheritance.CONTAINER_AND_OBJECT,
        )

    @staticmethod
    def grant_rules(
        identity: str,
        access: Rights | str = Rights.READ_AND_EXECUTE,
        inherit_scope: InheritScope | str = InheritScope.ALL,
    ) -> tuple[AccessRule, AccessRule]:
        """Return the ``(container_rule, leaf_rule)`` pair used by grant_access."""
        rights = Rights(access)
        scope = InheritScope(inherit_scope)
        container_rule = AccessRule(identity, rights, RuleType.ALLOW, scope.to_inheritance())
        leaf_rule = AccessRule(identity, rights, RuleType.ALLOW, Inheritance.NONE)
        return container_rule, leaf_rule

    # ------------------------------------------------------------------
    # Operations
    # ------------------------------------------------------------------

    def deny_access(
        self,
        paths: Iterable[PathInput],
        identity: str = DEFAULT_IDENTITY,
    ) -> list[AccessUpdate]:
        """Block *identity* from every path with a Deny/FullControl rule.

        Any existing Deny rule for the identity is replaced, so repeating
        the call leaves exactly one Deny rule.
        """
        rule = self.deny_rule(identity)

        def mutate(descriptor: SecurityDescriptor, is_container: bool) -> None:
            descriptor.set_rule(rule)

        return self._apply("deny_access", paths, identity, mutate)

    def rescind_deny(
        self,
        paths: Iterable[PathInput],
        identity: str = DEFAULT_IDENTITY,
    ) -> list[AccessUpdate]:
        """Remove the Deny rule that :meth:`deny_access` adds.

        Only a rule identical to :meth:`deny_rule` is removed; a Deny rule
        with other rights or inheritance is left in place.  Missing rules
        are not an error.  Once every path is processed an advisory notice
        is emitted, because unblocking does not grant access.
        """
        rule = self.deny_rule(identity)

        def mutate(descriptor: SecurityDescriptor, is_container: bool) -> None:
            descriptor.remove_rule_specific(rule)

        updates = self._apply("rescind_deny", paths, identity, mutate)
        self._emit_notice(RESCIND_NOTICE.format(identity=identity))
        return updates

    def grant_access(
        self,
        paths: Iterable[PathInput],
        identity: str = DEFAULT_IDENTITY,
        access: Rights | str = Rights.READ_AND_EXECUTE,
        inherit_scope: InheritScope | str = InheritScope.ALL,
    ) -> list[AccessUpdate]:
        """Allow *identity* the given rights on every path.

        Folders get an inheriting rule (``ContainerAndObject`` for
        ``All``, ``ObjectOnly`` for ``ThisFolder``); files get a rule with
        no inheritance.  Any existing Allow rule for the identity is
        replaced regardless of its rights or inheritance.
        """
        container_rule, leaf_rule = self.grant_rules(identity, access, inherit_scope)

        def mutate(descriptor: SecurityDescriptor, is_container: bool) -> None:
            descriptor.set_rule(container_rule if is_container else leaf_rule)

        return self._apply("grant_access", paths, identity, mutate)

    def revoke_access(
        self,
        paths: Iterable[PathInput],
        identity: str = DEFAULT_IDENTITY,
    ) -> list[AccessUpdate]:
        """Remove the Allow rule for *identity* from every path.

        The rule is matched on identity and type only, so an Allow rule is
        removed whatever rights or inheritance it carries.  Deny rules are
        never touched.
        """
        if not identity:
            raise ValueError("identity must not be empty.")

        def mutate(descriptor: SecurityDescriptor, is_container: bool) -> None:
            descriptor.remove_first(identity, RuleType.ALLOW)

        return self._apply("revoke_access", paths, identity, mutate)

    def inspect(
        self,
        paths: Iterable[PathInput],
        identity: str = DEFAULT_IDENTITY,
    ) -> list[AccessUpdate]:
        """Read the current descriptors without writing anything back."""
        updates: list[AccessUpdate] = []
        for item in paths:
            path = coerce_path(item)
            updates.append(
                AccessUpdate(
                    path=path,
                    is_container=self._store.is_container(path),
                    operation="inspect",
                    identity=identity,
                    changed=False,
                    descriptor=self._store.read_descriptor(path),
                )
            )
        return updates

    # ------------------------------------------------------------------
    # Internal helpers
    # ------------------------------------------------------------------

    def _apply(
        self,
        operation: str,
        paths: Iterable[PathInput],
        identity: str,
        mutate: _Mutator,
    ) -> list[AccessUpdate]:
        """Run one read-modify-write cycle per path, stopping at the first error."""
        updates: list[AccessUpdate] = []
        for item in paths:
            path = coerce_path(item)
            descriptor = self._store.read_descriptor(path)
            is_container = self._store.is_container(path)
            before = descriptor.copy()

            mutate(descriptor, is_container)
            self._store.write_descriptor(path, descriptor)

            update = AccessUpdate(
                path=path,
                is_container=is_container,
                operation=operation,
                identity=identity,
                changed=descriptor != before,
                descriptor=descriptor,
            )
            logger.debug(
                "%s: path=%s identity=%s container=%s changed=%s",
                operation,
                path,
                identity,
                is_container,
                update.changed,
            )
            if self._audit_logger is not None:
                self._audit_logger.record_update(update)
            updates.append(update)

        logger.info(
            "%s for '%s' processed %d path(s), %d changed",
            operation,
            identity,
            len(updates),
            sum(1 for u in updates if u.changed),
        )
        return updates

    def _emit_notice(self, message: str) -> None:
        if self._notice is not None:
            self._notice(message)
        else:
            logger.warning(message)


def coerce_path(item: PathInput) -> str:
    """Return the path string carried by *item*.

    Accepts plain strings, ``os.PathLike`` objects, and records exposing a
    ``path`` attribute (such as :class:`AccessUpdate`).
    """
    if isinstance(item, str):
        return item
    if isinstance(item, os.PathLike):
        return os.fspath(item)
    inner = getattr(item, "path", None)
    if inner is not None and inner is not item:
        return coerce_path(inner)
    raise TypeError(f"Cannot determine a path from {item!r}.")
