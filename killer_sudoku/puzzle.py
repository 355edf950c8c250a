#!/usr/bin/env python

"""
killer_sudoku/puzzle.py

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

**Cells, cages and the Killer Sudoku puzzle model.**

All row/column numbers here are one-based (1-9), as a human would count
them. Digits are also one-based; 0 means "no digit".

"""

import logging
from typing import Iterable, List, Sequence

from killer_sudoku.common import (
    box_index_zb,
    cell_label,
    COLUMN_LETTERS,
    DIGITS,
    N,
)

log = logging.getLogger(__name__)


# =============================================================================
# Cell
# =============================================================================

class Cell(object):
    """
    Immutable (row, column) coordinate within the 9x9 grid.
    """
    def __init__(self, row: int, col: int) -> None:
        """
        Args:
            row: one-based row number, 1-9
            col: one-based column number, 1-9
        """
        if not (1 <= row <= N and 1 <= col <= N):
            raise ValueError(
                f"Row/col must be 1..{N}; was (row={row}, col={col})")
        self._row = row
        self._col = col

    @property
    def row(self) -> int:
        return self._row

    @property
    def col(self) -> int:
        return self._col

    @property
    def box_zb(self) -> int:
        """
        Zero-based number (0-8) of the 3x3 box containing this cell.
        """
        return box_index_zb(self._row, self._col)

    @property
    def label(self) -> str:
        """
        Spreadsheet-style label: column letter, then row number; e.g.
        row 7, column 2 is ``B7``.
        """
        return cell_label(self._row, self._col)

    @classmethod
    def from_label(cls, label: str) -> "Cell":
        """
        Parses a label such as ``B7`` (case-insensitive).
        """
        text = label.strip().upper()
        if (len(text) != 2 or text[0] not in COLUMN_LETTERS or
                not text[1].isdigit() or text[1] == "0"):
            raise ValueError(f"Bad cell label {label!r}; should be A1..I9")
        return cls(row=int(text[1]),
                   col=COLUMN_LETTERS.index(text[0]) + 1)

    def __str__(self) -> str:
        return f"({self._row},{self._col})"

    def __repr__(self) -> str:
        return f"Cell(row={self._row}, col={self._col})"

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Cell):
            return NotImplemented
        return self._row == other._row and self._col == other._col

    def __hash__(self) -> int:
        return hash((self._row, self._col))


# =============================================================================
# Cage
# =============================================================================

class Cage(object):
    """
    A group of cells whose (distinct) digits must add up to a target.

    The order of the cells matters: digit sequences generated for the cage
    are assigned to its cells in this order.
    """
    def __init__(self, cells: Iterable[Cell], total: int) -> None:
        """
        Args:
            cells: the cells, in order
            total: the target sum; a positive integer

        Repeated cells are not rejected here; :meth:`Puzzle.add_cage` does
        that.
        """
        cells = tuple(cells)
        if not cells:
            raise ValueError("A cage must contain at least one cell")
        if total < 1:
            raise ValueError(f"Cage sum must be positive; was {total}")
        self._cells = cells
        self._total = total

    @classmethod
    def from_rows_cols(cls, rows: Sequence[int], cols: Sequence[int],
                       total: int) -> "Cage":
        """
        Creates a cage from parallel lists of one-based row and column
        numbers.
        """
        if len(rows) != len(cols):
            raise ValueError(
                f"Row and column arrays must have same length; "
                f"were {len(rows)} and {len(cols)}")
        return cls([Cell(r, c) for r, c in zip(rows, cols)], total)

    @property
    def cells(self) -> List[Cell]:
        return list(self._cells)

    @property
    def total(self) -> int:
        return self._total

    @property
    def size(self) -> int:
        return len(self._cells)

    def __len__(self) -> int:
        return len(self._cells)

    def __contains__(self, cell: Cell) -> bool:
        return cell in self._cells

    def __str__(self) -> str:
        labels = " ".join(c.label for c in self._cells)
        return f"{self._total}: {labels}"

    def __repr__(self) -> str:
        return f"Cage(cells={list(self._cells)!r}, total={self._total})"

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Cage):
            return NotImplemented
        return self._cells == other._cells and self._total == other._total

    def __hash__(self) -> int:
        return hash((self._cells, self._total))


# =============================================================================
# Puzzle
# =============================================================================

class Puzzle(object):
    """
    Givens and cages for a 9x9 Killer Sudoku.

    Every cell may belong to at most one cage; that is checked as cages are
    added. A solvable puzzle needs every cell in exactly one cage; use
    :meth:`missing_cells` to check that before solving.
    """
    def __init__(self) -> None:
        self._cages = []  # type: List[Cage]
        self._givens = [
            [
                0 for _col_zb in range(N)
            ] for _row_zb in range(N)
        ]  # type: List[List[int]]
        # ... index as: self._givens[row_zb][col_zb]
        self._in_cage = [
            [
                False for _col_zb in range(N)
            ] for _row_zb in range(N)
        ]  # type: List[List[bool]]
        # ... index as: self._in_cage[row_zb][col_zb]

    @staticmethod
    def _check_row_col(row: int, col: int) -> None:
        if not (1 <= row <= N and 1 <= col <= N):
            raise ValueError(
                f"Row/col must be 1..{N}; was (row={row}, col={col})")

    # -------------------------------------------------------------------------
    # Cages
    # -------------------------------------------------------------------------

    def add_cage(self, cage: Cage) -> None:
        """
        Adds a cage and marks its cells as occupied.

        Raises:
            :exc:`ValueError` if any of its cells is already in a cage, or
            appears twice in this cage. Nothing is changed in that case.
        """
        seen = set()
        for cell in cage.cells:
            if cell in seen or self._in_cage[cell.row - 1][cell.col - 1]:
                raise ValueError(
                    f"Cell {cell.label} {cell} is already in a cage")
            seen.add(cell)
        for cell in cage.cells:
            self._in_cage[cell.row - 1][cell.col - 1] = True
        self._cages.append(cage)

    @property
    def cages(self) -> List[Cage]:
        """
        The cages, in the order they were added. (A copy.)
        """
        return list(self._cages)

    def is_in_cage(self, row: int, col: int) -> bool:
        self._check_row_col(row, col)
        return self._in_cage[row - 1][col - 1]

    def missing_cells(self) -> List[Cell]:
        """
        Cells that are not in any cage, in row-major order.
        """
        return [
            Cell(r, c)
            for r in range(1, N + 1)
            for c in range(1, N + 1)
            if not self._in_cage[r - 1][c - 1]
        ]

    # -------------------------------------------------------------------------
    # Givens
    # -------------------------------------------------------------------------

    def set_given(self, row: int, col: int, digit: int) -> None:
        """
        Sets a prefilled digit. A digit of 0 clears it.
        """
        self._check_row_col(row, col)
        if not (0 <= digit <= N):
            raise ValueError(f"Digit must be 0..{N} (0 clears); was {digit}")
        self._givens[row - 1][col - 1] = digit

    def given(self, row: int, col: int) -> int:
        """
        The prefilled digit at this cell, or 0 if there isn't one.
        """
        self._check_row_col(row, col)
        return self._givens[row - 1][col - 1]

    # -------------------------------------------------------------------------
    # Checking answers
    # -------------------------------------------------------------------------

    def check_solution(self, grid: List[List[int]]) -> List[str]:
        """
        Checks a completed grid (index as ``grid[row_zb][col_zb]``) against
        the Sudoku rules, the givens and the cages.

        Returns:
            a list of problems; empty if the grid is a valid solution
        """
        problems = []  # type: List[str]
        wanted = set(DIGITS)
        for r in range(N):
            if set(grid[r]) != wanted:
                problems.append(f"Row {r + 1} is not a permutation of 1-9")
        for c in range(N):
            if set(grid[r][c] for r in range(N)) != wanted:
                problems.append(f"Column {c + 1} is not a permutation of 1-9")
        for b in range(N):
            box_digits = set(
                grid[r][c]
                for r in range(N)
                for c in range(N)
                if box_index_zb(r + 1, c + 1) == b
            )
            if box_digits != wanted:
                problems.append(f"Box {b} is not a permutation of 1-9")
        for r in range(N):
            for c in range(N):
                g = self._givens[r][c]
                if g and grid[r][c] != g:
                    problems.append(
                        f"{cell_label(r + 1, c + 1)} should be the given "
                        f"{g} but is {grid[r][c]}")
        for k, cage in enumerate(self._cages):
            digits = [grid[cell.row - 1][cell.col - 1] for cell in cage.cells]
            if len(set(digits)) != len(digits):
                problems.append(f"Cage {k + 1} repeats a digit: {digits}")
            if sum(digits) != cage.total:
                problems.append(
                    f"Cage {k + 1} sums to {sum(digits)}, not {cage.total}")
        return problems
