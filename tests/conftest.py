import sys
from pathlib import Path

# Ensure package import for tests
ROOT = Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

import pytest

from engine.timer import TickTimer
from graph import Graph


class FakeClock:
    """Manually advanced stand-in for time.monotonic."""

    def __init__(self) -> None:
        self.now = 0.0

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


def build_triangle() -> Graph:
    """A(0)-B(1):5, B-C(2):3, A-C:10, nodes far enough apart for hit tests."""
    g = Graph()
    a = g.add_node(100, 100)
    b = g.add_node(300, 100)
    c = g.add_node(200, 300)
    g.add_edge(a.id, b.id, 5)
    g.add_edge(b.id, c.id, 3)
    g.add_edge(a.id, c.id, 10)
    return g


def build_kite() -> Graph:
    """Triangle A-B:1, B-C:2, A-C:3 with a tail C-D:4.  Both algorithms reject A-C once."""
    g = Graph()
    for x, y in ((100, 100), (300, 100), (200, 250), (200, 450)):
        g.add_node(x, y)
    g.add_edge(0, 1, 1)
    g.add_edge(1, 2, 2)
    g.add_edge(0, 2, 3)
    g.add_edge(2, 3, 4)
    return g


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture
def timer(clock) -> TickTimer:
    return TickTimer(clock)


@pytest.fixture
def triangle() -> Graph:
    return build_triangle()


@pytest.fixture
def kite() -> Graph:
    return build_kite()
