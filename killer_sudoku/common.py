#!/usr/bin/env python

"""
killer_sudoku/common.py

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

Common constants and functions for the Killer Sudoku solver.

"""

import logging
import sys
import traceback
from typing import Callable

from mip import Constr, Model, Var

log = logging.getLogger(__name__)


# =============================================================================
# Constants
# =============================================================================

N = 9  # grid size; also the number of digits
RANK = 3  # box size
DIGITS = tuple(range(1, N + 1))
MAX_CAGE_SUM = sum(DIGITS)  # 45

UNKNOWN = "."
NEWLINE = "\n"
SPACE = " "
HASH = "#"
COLUMN_LETTERS = "ABCDEFGHI"
ALMOST_ONE = 0.99

DEFAULT_MAX_SOLUTIONS = 10

EXIT_FAILURE = 1
EXIT_SUCCESS = 0


# =============================================================================
# Exceptions
# =============================================================================

class IncompletePuzzle(ValueError):
    """
    Raised when some cells of the grid belong to no cage, so the puzzle
    cannot be handed to a solver.
    """
    pass


# =============================================================================
# Functions for mip models
# =============================================================================

def debug_model_constraints(m: Model) -> None:
    """
    Shows constraints for a model.
    """
    lines = [f"Constraints in model {m.name!r}:"]
    for c in m.constrs:  # type: Constr
        lines.append(f"{c.name} == {c.expr}")
    log.debug("\n".join(lines))


def debug_model_vars(m: Model) -> None:
    """
    Show the names/values of model variables after fitting.
    """
    lines = [f"Variables in model {m.name!r}:"]
    for v in m.vars:  # type: Var
        lines.append(f"{v.name} == {v.x}")
    log.debug("\n".join(lines))


# =============================================================================
# Generic helper functions
# =============================================================================

def box_index_zb(row: int, col: int) -> int:
    """
    Zero-based box number (0-8, left to right then top to bottom) for a
    one-based row/column.
    """
    return ((row - 1) // RANK) * RANK + ((col - 1) // RANK)


def cell_label(row: int, col: int) -> str:
    """
    Label for a one-based row/column, e.g. ``(7, 2)`` is ``B7``. Letters are
    columns, numbers are rows.
    """
    return f"{COLUMN_LETTERS[col - 1]}{row}"


def run_guard(function: Callable[[], None]) -> None:
    try:
        function()
    except Exception as e:
        log.critical(str(e))
        traceback.print_exc()
        sys.exit(EXIT_FAILURE)
