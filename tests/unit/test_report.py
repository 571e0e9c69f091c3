"""Unit tests for BenchmarkReport."""

import dataclasses
import io

import pytest

from devtimer.report import BenchmarkReport


def test_format() -> None:
    """Test the three-line summary format."""
    report = BenchmarkReport(fastest=100, slowest=400, average=190, iterations=5)
    assert report.format() == "Slowest: 400 ns\nFastest: 100 ns\nAverage: 190 ns/iter"
    assert str(report) == report.format()


def test_print_to_file() -> None:
    """Test printing the summary to a stream."""
    report = BenchmarkReport(fastest=1, slowest=3, average=2, iterations=3)
    out = io.StringIO()
    report.print(file=out)
    assert out.getvalue().splitlines() == ["Slowest: 3 ns", "Fastest: 1 ns", "Average: 2 ns/iter"]


def test_print_to_stdout(capsys: pytest.CaptureFixture[str]) -> None:
    """Test that print() defaults to stdout."""
    BenchmarkReport(fastest=5, slowest=5, average=5, iterations=1).print()
    assert capsys.readouterr().out.startswith("Slowest: 5 ns\n")


def test_immutable() -> None:
    """Test that reports cannot be modified after construction."""
    report = BenchmarkReport(fastest=1, slowest=1, average=1, iterations=1)
    with pytest.raises(dataclasses.FrozenInstanceError):
        report.fastest = 0  # type: ignore[misc]


def test_to_dict() -> None:
    """Test dict export."""
    report = BenchmarkReport(fastest=1, slowest=9, average=4, iterations=3)
    assert report.to_dict() == {"fastest": 1, "slowest": 9, "average": 4, "iterations": 3}


@pytest.mark.parametrize(
    ("fastest", "slowest", "average", "iterations"),
    [
        (1, 2, 1, 0),  # no iterations
        (-1, 2, 1, 2),  # negative duration
        (5, 2, 3, 2),  # fastest > slowest
        (1, 2, 3, 2),  # average above slowest
    ],
)
def test_invalid_reports(fastest: int, slowest: int, average: int, iterations: int) -> None:
    """Test that inconsistent reports are rejected."""
    with pytest.raises(ValueError):
        BenchmarkReport(fastest=fastest, slowest=slowest, average=average, iterations=iterations)
