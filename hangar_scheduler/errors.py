"""Exception types raised by the hangar scheduler.

Business outcomes (violations, unscheduled inductions) are never raised; only
bad input and precedence cycles are.
"""

from __future__ import annotations

from typing import List, Sequence


class HangarSchedulerError(Exception):
    """Base class for all errors raised by this package."""


class ConfigError(HangarSchedulerError, ValueError):
    """Configuration file is missing, unreadable or has unknown keys."""


class ModelError(HangarSchedulerError, ValueError):
    """Model snapshot is missing a required field or cannot be read."""


class PrecedenceCycleError(HangarSchedulerError, RuntimeError):
    """Auto-induction precedence references form a cycle."""

    rule_id = "SFR18_PRECEDENCE_CYCLE"

    def __init__(self, cycle: Sequence[str]):
        self.cycle: List[str] = list(cycle)
        super().__init__(
            f"[{self.rule_id}] Circular precedence dependency: {' -> '.join(self.cycle)}"
        )
