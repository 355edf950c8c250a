# tests/conftest.py
from typing import List

import pytest

from killer_sudoku.common import cell_label
from killer_sudoku.killer import DEMO_KILLER_1, parse_puzzle
from killer_sudoku.puzzle import Puzzle

# The grid from which every demo cage sum was taken.
SOLVED_GRID = [
    [5, 3, 4, 6, 7, 8, 9, 1, 2],
    [6, 7, 2, 1, 9, 5, 3, 4, 8],
    [1, 9, 8, 3, 4, 2, 5, 6, 7],
    [8, 5, 9, 7, 6, 1, 4, 2, 3],
    [4, 2, 6, 8, 5, 3, 7, 9, 1],
    [7, 1, 3, 9, 2, 4, 8, 5, 6],
    [9, 6, 1, 5, 3, 7, 2, 8, 4],
    [2, 8, 7, 4, 1, 9, 6, 3, 5],
    [3, 4, 5, 2, 8, 6, 1, 7, 9],
]

# Two "deadly rectangles" in SOLVED_GRID: the digits in each pair of vertical
# two-cell cages can be swapped without breaking any rule.
SWAPPABLE_PAIRS = [
    ((4, 6), (5, 6)),
    ((4, 9), (5, 9)),
    ((7, 4), (8, 4)),
    ((7, 9), (8, 9)),
]


@pytest.fixture
def solved_grid() -> List[List[int]]:
    return [list(row) for row in SOLVED_GRID]


@pytest.fixture
def demo_puzzle() -> Puzzle:
    return parse_puzzle(DEMO_KILLER_1)


@pytest.fixture
def four_solution_text() -> str:
    """
    Every cell is a one-cell cage except the swappable pairs, giving exactly
    four solutions.
    """
    paired = set()
    lines = []
    for (r1, c1), (r2, c2) in SWAPPABLE_PAIRS:
        paired.update([(r1, c1), (r2, c2)])
        total = SOLVED_GRID[r1 - 1][c1 - 1] + SOLVED_GRID[r2 - 1][c2 - 1]
        lines.append(f"{total}: {cell_label(r1, c1)} {cell_label(r2, c2)}")
    for r in range(1, 10):
        for c in range(1, 10):
            if (r, c) not in paired:
                lines.append(f"{SOLVED_GRID[r - 1][c - 1]}: {cell_label(r, c)}")  # noqa
    return "\n".join(lines)
