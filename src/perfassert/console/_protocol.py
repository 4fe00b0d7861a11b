"""perfassert.console._protocol -- ConsoleProtocol definition.

Pure standard-library typing.Protocol for gate output.
No external dependencies allowed in this file.
"""

from __future__ import annotations

from typing import Protocol


class ConsoleProtocol(Protocol):
    """Terminal output protocol for the gate.

    **General messages**::

        console.info("Running benchmarks...")
        console.success("Threshold checks passed")
        console.warning("No benchmark is mapped to a group")
        console.error("benchmark BenchmarkX exceeded ns/op threshold")

    ``error`` writes to stderr; everything else goes to stdout.

    **Structured output**::

        console.table(["Benchmark", "ns/op"], [["BenchmarkX", "95.4"]], title="Results")

    **Gate verdict**::

        console.verdict(passed=True, checked=12, violations=0)
    """

    # -- General messages ---------------------------------------------------

    def info(self, message: str) -> None:
        """Informational message."""
        ...

    def success(self, message: str) -> None:
        """Success / positive-outcome message."""
        ...

    def warning(self, message: str) -> None:
        """Warning message."""
        ...

    def error(self, message: str) -> None:
        """Error message, written to stderr."""
        ...

    # -- Structured output --------------------------------------------------

    def table(self, headers: list[str], rows: list[list[str]], *, title: str = "") -> None:
        """Display a table with *headers* and *rows*."""
        ...

    # -- Gate verdict -------------------------------------------------------

    def verdict(self, *, passed: bool, checked: int, violations: int) -> None:
        """Display the closing pass/fail line of a gate run."""
        ...
