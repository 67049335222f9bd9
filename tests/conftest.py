import sys
from pathlib import Path

import pytest

# Ensure the 'src' directory is on sys.path for imports in tests
ROOT = Path(__file__).resolve().parents[1]
SRC = ROOT / "src"
if str(SRC) not in sys.path:
    sys.path.insert(0, str(SRC))


@pytest.fixture
def four_blocks():
    return [b"data1", b"data2", b"data3", b"data4"]


@pytest.fixture
def blocks_of():
    """Factory for n distinct single-letter blocks."""

    def _make(n: int):
        return [bytes([ord("A") + i]) for i in range(n)]

    return _make
