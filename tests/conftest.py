import pytest


class CountingRng:
    """Stand-in for random.Random that hands out 0, 1, 2, ... in turn."""

    def __init__(self):
        self.value = -1

    def _next(self) -> int:
        self.value += 1
        return self.value

    def randint(self, a: int, b: int) -> int:
        return a + self._next() % (b - a + 1)

    def randrange(self, n: int) -> int:
        return self._next() % n


@pytest.fixture
def counting_rng():
    return CountingRng()
