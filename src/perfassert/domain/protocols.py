"""Protocol interfaces for perfassert components.

Protocols use structural subtyping: any class with a matching ``run``
method satisfies ``BenchmarkRunner`` without inheriting from it.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Protocol

if TYPE_CHECKING:
    from perfassert.domain.models import RunnerOutput


class BenchmarkRunner(Protocol):
    """Interface for executing a benchmark harness."""

    def run(self, pattern: str, flags: list[str]) -> RunnerOutput:
        """Run benchmarks matching *pattern* and return the combined output.

        Raises:
            RunnerError: If the runner could not be started at all.
        """
        ...
