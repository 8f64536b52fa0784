#!/usr/bin/env python3
"""Example: share-access quickstart

Grant a class folder to students, block one cohort from the exam bank,
then lift the block again.

Usage:
    python examples/01_quickstart.py

Requirements:
    pip install share-access
"""
from __future__ import annotations

import share_access as sa


def main() -> None:
    print(f"share-access version: {sa.__version__}")

    # Step 1: Describe the share (a real deployment uses YamlDescriptorStore)
    store = sa.InMemoryDescriptorStore(
        {
            "/shared/classA": True,
            "/shared/classA/readme.txt": False,
            "/shared/examBank": True,
        }
    )
    manager = sa.AccessRuleManager(store, notice=lambda msg: print(f"  note: {msg}"))

    # Step 2: Let students edit files directly inside classA
    for update in manager.grant_access(
        ["/shared/classA", "/shared/classA/readme.txt"],
        access=sa.Rights.MODIFY,
        inherit_scope=sa.InheritScope.THIS_FOLDER,
    ):
        rules = [r.describe() for r in update.descriptor.rules_for(update.identity)]
        print(f"  {update.path}: {update.state.value} {rules}")

    # Step 3: Block and unblock one cohort on the exam bank
    manager.deny_access(["/shared/examBank"], identity="2025 Students")
    for update in manager.rescind_deny(["/shared/examBank"], identity="2025 Students"):
        print(f"  {update.path}: {update.state.value}")

    print("Suggested identities:", ", ".join(sa.suggest_identities()))


if __name__ == "__main__":
    main()
