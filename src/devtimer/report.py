"""Immutable summary of a benchmark run."""

import sys
from dataclasses import asdict, dataclass
from typing import TextIO


@dataclass(frozen=True)
class BenchmarkReport:
    """Fastest, slowest and average per-iteration time of a benchmark run.

    All durations are integer nanoseconds. ``average`` is the truncated mean
    of every sample, so ``fastest <= average <= slowest`` always holds.

    Attributes:
        fastest: Shortest sample
        slowest: Longest sample
        average: Sum of all samples divided by the iteration count
        iterations: Number of samples the report was reduced from
    """

    fastest: int
    slowest: int
    average: int
    iterations: int

    def __post_init__(self) -> None:
        if self.iterations < 1:
            raise ValueError(f"A report needs at least one iteration, got {self.iterations}")
        if self.fastest < 0:
            raise ValueError(f"Durations must be non-negative, got fastest={self.fastest}")
        if not self.fastest <= self.average <= self.slowest:
            raise ValueError(
                f"Expected fastest <= average <= slowest, got "
                f"{self.fastest} / {self.average} / {self.slowest}"
            )

    def format(self) -> str:
        """Render the three-line text summary."""
        return (
            f"Slowest: {self.slowest} ns\n"
            f"Fastest: {self.fastest} ns\n"
            f"Average: {self.average} ns/iter"
        )

    def print(self, file: TextIO | None = None) -> None:
        """Write the text summary to ``file`` (default: stdout)."""
        print(self.format(), file=file if file is not None else sys.stdout)

    def to_dict(self) -> dict[str, int]:
        return asdict(self)

    def __str__(self) -> str:
        return self.format()
