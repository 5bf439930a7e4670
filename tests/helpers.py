"""Test helpers (small, reusable doubles).

Keep this file tiny and purpose-built: it exists to prevent test suites from
growing lots of one-off thunk closures as coverage expands.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any


@dataclass
class ScriptedThunk:
    """Zero-argument async operation that returns or raises a scripted outcome.

    Counts invocations so tests can assert the executor never retries.
    """

    outcome: Any = "Success"
    calls: int = 0

    async def __call__(self) -> Any:
        self.calls += 1
        if isinstance(self.outcome, BaseException):
            raise self.outcome
        return self.outcome


class CustomError(Exception):
    """An error type no transport adapter raises."""
