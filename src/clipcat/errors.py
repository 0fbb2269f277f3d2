# Copyright (C) 2025-2026 Retio AI
# SPDX-License-Identifier: AGPL-3.0-only

"""clipcat exception hierarchy.

Classification itself never raises: every input has a defined category.
These errors cover broken rule data and invalid classifier configuration,
both of which are programming or packaging mistakes caught at startup.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from clipcat.rules import RuleIssue


class ClipcatError(Exception):
    """Base exception for all clipcat errors."""


class RuleTableError(ClipcatError):
    """A rule file is missing, unparsable, or structurally invalid."""

    def __init__(self, message: str, *, source: str = "") -> None:
        super().__init__(f"{source}: {message}" if source else message)
        self.source = source


class AmbiguousRuleError(ClipcatError):
    """Rule tables loaded but contain overlapping or unreachable entries."""

    def __init__(self, issues: list[RuleIssue]) -> None:
        lines = "\n".join(f"  - {issue}" for issue in issues)
        super().__init__(f"{len(issues)} rule table issue(s):\n{lines}")
        self.issues = issues


class ConfigError(ClipcatError):
    """Classifier thresholds or logging settings are out of range or inconsistent."""
