#!/usr/bin/env python

"""
killer_sudoku/matrix.py

===============================================================================

    Copyright (C) 2019-2019 Rudolf Cardinal (rudolf@pobox.com).

    This is free software: you can redistribute it and/or modify
    it under the terms of the GNU General Public License as published by
    the Free Software Foundation, either version 3 of the License, or
    (at your option) any later version.

    This software is distributed in the hope that it will be useful,
    but WITHOUT ANY WARRANTY; without even the implied warranty of
    MERCHANTABILITY or FITNESS FOR A PARTICULAR PURPOSE. See the
    GNU General Public License for more details.

    You should have received a copy of the GNU General Public License
    along with this software. If not, see <http://www.gnu.org/licenses/>.

===============================================================================

**Expresses a Killer Sudoku as an exact-cover problem.**

Columns (constraints), each of which must be satisfied exactly once:

.. code-block:: none

    0-80      cell (r, c) is filled
    81-161    row r contains digit d
    162-242   column c contains digit d
    243-323   box b contains digit d
    324+      cage k has been filled (one column per cage)

Rows (candidates): for each cage, for each sequence of distinct digits
adding up to the cage's target, "fill the cage's cells, in order, with these
digits". A row for a cage of K cells has 4K + 1 ones.

Givens are respected by never creating rows that disagree with them.

"""

import logging
from typing import Dict, Iterable, List, Sequence, Tuple

from killer_sudoku.common import N
from killer_sudoku.dlx import DancingLinks
from killer_sudoku.permutations import gen_distinct_digit_sequences
from killer_sudoku.puzzle import Puzzle

log = logging.getLogger(__name__)


# =============================================================================
# Column arithmetic
# =============================================================================

CELL_OFFSET = 0
ROW_DIGIT_OFFSET = N * N  # 81
COL_DIGIT_OFFSET = 2 * N * N  # 162
BOX_DIGIT_OFFSET = 3 * N * N  # 243
CAGE_OFFSET = 4 * N * N  # 324


def cell_column(row: int, col: int) -> int:
    return CELL_OFFSET + (row - 1) * N + (col - 1)


def row_digit_column(row: int, digit: int) -> int:
    return ROW_DIGIT_OFFSET + (row - 1) * N + (digit - 1)


def col_digit_column(col: int, digit: int) -> int:
    return COL_DIGIT_OFFSET + (col - 1) * N + (digit - 1)


def box_digit_column(box_zb: int, digit: int) -> int:
    return BOX_DIGIT_OFFSET + box_zb * N + (digit - 1)


def cage_column(cage_index: int) -> int:
    return CAGE_OFFSET + cage_index


def column_names(n_cages: int) -> List[str]:
    """
    Human-readable names for every column, for debugging.
    """
    names = [""] * (CAGE_OFFSET + n_cages)
    for r in range(1, N + 1):
        for c in range(1, N + 1):
            names[cell_column(r, c)] = f"Cell(r={r},c={c})"
    for x in range(1, N + 1):
        for d in range(1, N + 1):
            names[row_digit_column(x, d)] = f"Row(r={x})#{d}"
            names[col_digit_column(x, d)] = f"Col(c={x})#{d}"
            names[box_digit_column(x - 1, d)] = f"Box(b={x - 1})#{d}"
    for k in range(n_cages):
        names[cage_column(k)] = f"Cage#{k}"
    return names


# =============================================================================
# RowDecode
# =============================================================================

class RowDecode(object):
    """
    What a row of the exact-cover matrix means: "cage ``cage_index`` has
    digit ``digits[i]`` at row ``rows[i]``, column ``cols[i]``".
    """
    def __init__(self, cage_index: int, rows: Sequence[int],
                 cols: Sequence[int], digits: Sequence[int]) -> None:
        if not (len(rows) == len(cols) == len(digits)):
            raise ValueError("rows, cols and digits must have same length")
        self.cage_index = cage_index
        self.rows = tuple(rows)
        self.cols = tuple(cols)
        self.digits = tuple(digits)

    def __repr__(self) -> str:
        return (
            f"RowDecode(cage_index={self.cage_index}, rows={self.rows}, "
            f"cols={self.cols}, digits={self.digits})"
        )

    def assignments(self) -> Iterable[Tuple[int, int, int]]:
        """
        Yields ``row, col, digit`` tuples (all one-based).
        """
        return zip(self.rows, self.cols, self.digits)


# =============================================================================
# KillerMatrixBuilder
# =============================================================================

class KillerMatrixBuilder(object):
    """
    Builds a :class:`DancingLinks` engine for a :class:`Puzzle`, and
    remembers what each of its rows means.

    The puzzle is trusted: cells are in range and cages don't overlap. If
    some cells are in no cage, their cell columns can never be covered, so
    there will be no solution.
    """
    def __init__(self, puzzle: Puzzle) -> None:
        self.puzzle = puzzle
        self.row_decodes = []  # type: List[RowDecode]
        # ... index by row ID
        self.rows_per_cage = {}  # type: Dict[int, int]

    def build(self) -> DancingLinks:
        """
        Creates the engine. Rebuilding starts from scratch.
        """
        puzzle = self.puzzle
        cages = puzzle.cages
        n_columns = CAGE_OFFSET + len(cages)
        dlx = DancingLinks(n_columns, names=column_names(len(cages)))
        self.row_decodes = []
        self.rows_per_cage = {}

        next_row_id = 0
        for k, cage in enumerate(cages):
            cells = cage.cells
            givens = [puzzle.given(cell.row, cell.col) for cell in cells]
            n_rows_before = next_row_id
            for digits in gen_distinct_digit_sequences(
                    len(cells), cage.total, fixed=givens):
                columns = [cage_column(k)]
                for cell, d in zip(cells, digits):
                    columns.append(cell_column(cell.row, cell.col))
                    columns.append(row_digit_column(cell.row, d))
                    columns.append(col_digit_column(cell.col, d))
                    columns.append(box_digit_column(cell.box_zb, d))
                dlx.add_row(next_row_id, columns)
                self.row_decodes.append(RowDecode(
                    cage_index=k,
                    rows=[cell.row for cell in cells],
                    cols=[cell.col for cell in cells],
                    digits=digits,
                ))
                next_row_id += 1
            n = next_row_id - n_rows_before
            self.rows_per_cage[k] = n
            if n == 0:
                log.debug(f"Cage {k + 1} ({cage}) has no possible digits; "
                          f"the puzzle cannot be solved")

        log.debug(f"Exact-cover matrix: {dlx.n_columns} columns, "
                  f"{dlx.n_rows} rows, {dlx.n_nodes} nodes")
        return dlx

    def row_decode(self, row_id: int) -> RowDecode:
        return self.row_decodes[row_id]

    def grid_from_solution(self, row_ids: Iterable[int]) -> List[List[int]]:
        """
        See :func:`grid_from_row_ids`.
        """
        return grid_from_row_ids(row_ids, self.row_decodes)


# =============================================================================
# Solution reconstruction
# =============================================================================

def grid_from_row_ids(row_ids: Iterable[int],
                      row_decodes: Sequence[RowDecode]) -> List[List[int]]:
    """
    Turns a solution (a list of row IDs) back into a grid of digits.

    Returns:
        grid indexed as ``grid[row_zb][col_zb]``; 0 for any cell not filled
    """
    grid = [
        [
            0 for _col_zb in range(N)
        ] for _row_zb in range(N)
    ]
    for row_id in row_ids:
        for r, c, d in row_decodes[row_id].assignments():
            grid[r - 1][c - 1] = d
    return grid
