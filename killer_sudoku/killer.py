#!/usr/bin/env python

"""
killer_sudoku/killer.py

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

**Solves Killer Sudoku puzzles.**

A Killer Sudoku is a Sudoku in which the grid is divided into "cages"; the
digits in a cage must be distinct and must add up to the cage's total.

It uses two approaches:

- Exact cover, via Knuth's Algorithm X with dancing links. Each candidate
  "way of filling a cage" is a row of the exact-cover matrix. This can also
  count solutions (up to a limit).

- Integer programming, which is close to magic, as a cross-check.

"""

import argparse
import logging
import re
import sys
from typing import List, Optional

from cardinal_pythonlib.argparse_func import RawDescriptionArgumentDefaultsHelpFormatter  # noqa
from cardinal_pythonlib.logs import main_only_quicksetup_rootlogger
from mip import BINARY, Model, xsum

from killer_sudoku.common import (
    ALMOST_ONE,
    box_index_zb,
    COLUMN_LETTERS,
    debug_model_constraints,
    debug_model_vars,
    DEFAULT_MAX_SOLUTIONS,
    EXIT_FAILURE,
    EXIT_SUCCESS,
    HASH,
    IncompletePuzzle,
    N,
    NEWLINE,
    run_guard,
    SPACE,
    UNKNOWN,
)
from killer_sudoku.matrix import KillerMatrixBuilder
from killer_sudoku.puzzle import Cage, Cell, Puzzle

log = logging.getLogger(__name__)


# =============================================================================
# Constants
# =============================================================================

DEMO_KILLER_1 = """
# Cages are "sum: cells"; cells are column letter then row number.
# A one-cell cage fixes a digit; so does a line such as "F8 = 9".

8: A1 B1
17: C1 D1 E1
17: F1 G1
11: H1 I1 I2
7: A2 A3
9: B2 C2
4: D2 D3
14: E2 F2
7: G2 H2
17: B3 C3
12: E3 F3 E4
9: G3 G4
13: H3 I3
13: A4 B4
24: C4 D4 D5
4: F4 F5
5: H4 I4
11: A5 A6
8: B5 C5
7: E5 E6
16: G5 H5
7: I5 I6
4: B6 C6
15: D6 C7 D7
12: F6 G6
13: H6 H7
15: A7 B7
4: E7 E8
9: F7 G7
9: I7 I8
5: A8 A9
15: B8 C8
6: D8 D9
9: F8
9: G8 H8
9: B9 C9
14: E9 F9
17: G9 H9 I9
"""

CAGE_REGEX = re.compile(r"^(\d+)\s*:\s*(.*)$")
GIVEN_REGEX = re.compile(r"^([A-Za-z]\d)\s*=\s*(\d+)$")
CELL_LIST_SEPARATORS = re.compile(r"[\s,\-]+")


# =============================================================================
# Parsing
# =============================================================================

def parse_cells(text: str) -> List[Cell]:
    """
    Parses a list of cells such as ``A1 A2 B1``, ``a1,a2,b1`` or ``A1A2B1``.
    """
    compact = CELL_LIST_SEPARATORS.sub("", text)
    if not compact:
        raise ValueError("No cells")
    if len(compact) % 2 != 0:
        raise ValueError(f"Bad cell list {text!r}")
    return [Cell.from_label(compact[i:i + 2])
            for i in range(0, len(compact), 2)]


def parse_puzzle(string_version: str) -> Puzzle:
    """
    Reads a puzzle from text. See :data:`DEMO_KILLER_1` for the format.
    """
    puzzle = Puzzle()
    for line_num, raw_line in enumerate(string_version.splitlines(), start=1):
        line = raw_line.strip()
        if not line or line.startswith(HASH):
            continue
        try:
            cage_match = CAGE_REGEX.match(line)
            if cage_match:
                total = int(cage_match.group(1))
                cells = parse_cells(cage_match.group(2))
                puzzle.add_cage(Cage(cells, total))
                continue
            given_match = GIVEN_REGEX.match(line)
            if given_match:
                cell = Cell.from_label(given_match.group(1))
                puzzle.set_given(cell.row, cell.col,
                                 int(given_match.group(2)))
                continue
            raise ValueError("not a cage (e.g. '12: A1 A2 B1') "
                             "or a given (e.g. 'A1 = 5')")
        except ValueError as e:
            raise ValueError(f"Line {line_num} ({line!r}): {e}") from e
    if not puzzle.cages:
        raise ValueError("No cages")
    return puzzle


# =============================================================================
# KillerSudoku
# =============================================================================

class KillerSudoku(object):
    """
    Represents and solves Killer Sudoku puzzles.
    """

    def __init__(self, string_version: str) -> None:
        """
        Args:
            string_version:
                String representation of the puzzle. Rules:

        - Blank lines and lines starting with ``#`` are ignored.
        - ``<sum>: <cells>`` defines a cage; the order of cells is kept.
        - ``<cell> = <digit>`` sets a given.
        - Cells are a column letter (A-I) then a row number (1-9).
        """
        self.puzzle = parse_puzzle(string_version)
        self.solved = False
        self.solution_data = None  # type: Optional[List[List[int]]]
        self.solutions = []  # type: List[List[List[int]]]
        self.working = []  # type: List[str]

    def __str__(self) -> str:
        return self.solution_str() if self.solved else self.problem_str()

    def problem_str(self) -> str:
        """
        Creates the string representation of the problem.
        """
        givens = [
            [
                self.puzzle.given(r, c) for c in range(1, N + 1)
            ] for r in range(1, N + 1)
        ]
        lines = [self._make_string(givens)]
        for k, cage in enumerate(self.puzzle.cages):
            labels = " ".join(cell.label for cell in cage.cells)
            lines.append(f"Cage {k + 1} (sum {cage.total}): {labels}")
        return NEWLINE.join(lines)

    def solution_str(self) -> str:
        """
        Creates the string representation of the solution(s).
        """
        if len(self.solutions) <= 1:
            return self._make_string(self.solution_data)
        n = len(self.solutions)
        return NEWLINE.join(
            f"Solution {i + 1} of {n}:{NEWLINE}{self._make_string(grid)}"
            for i, grid in enumerate(self.solutions)
        )

    @staticmethod
    def _make_string(data: List[List[int]]) -> str:
        x = SPACE * 3 + SPACE.join(COLUMN_LETTERS[:3])
        x += SPACE * 2 + SPACE.join(COLUMN_LETTERS[3:6])
        x += SPACE * 2 + SPACE.join(COLUMN_LETTERS[6:]) + NEWLINE
        for row_zb in range(N):
            x += f"{row_zb + 1} "
            for col_zb in range(N):
                d = data[row_zb][col_zb]
                x += SPACE + (str(d) if d else UNKNOWN)
                if col_zb % 3 == 2 and col_zb < N - 1:
                    x += SPACE
            x += NEWLINE
            if row_zb % 3 == 2 and row_zb < N - 1:
                x += NEWLINE
        return x

    def _check_complete(self) -> None:
        missing = self.puzzle.missing_cells()
        if missing:
            labels = ", ".join(cell.label for cell in missing)
            raise IncompletePuzzle(f"Some cells are not in any cage: {labels}")

    # -------------------------------------------------------------------------
    # Solve via exact cover
    # -------------------------------------------------------------------------

    def solve(self) -> None:
        """
        Finds the first solution, via dancing links, writing to
        :attr:`solved` and :attr:`solution_data`.
        """
        if self.solved:
            log.info("Already solved")
            return
        self._check_complete()
        builder = KillerMatrixBuilder(self.puzzle)
        dlx = builder.build()
        row_ids = dlx.solve_first()
        if row_ids is None:
            log.error("Unable to solve!")
            return
        self.solved = True
        self.working.append("Solved via exact cover (dancing links)")
        self.solution_data = builder.grid_from_solution(row_ids)
        self.solutions = [self.solution_data]
        problems = self.puzzle.check_solution(self.solution_data)
        assert not problems, f"Bad solution: {problems}"

    def solve_all(self,
                  max_solutions: Optional[int] = DEFAULT_MAX_SOLUTIONS) \
            -> int:
        """
        Finds up to ``max_solutions`` solutions (``None`` for no limit),
        writing to :attr:`solutions`; the first is also in
        :attr:`solution_data`.

        Returns:
            the number of solutions found
        """
        self._check_complete()
        builder = KillerMatrixBuilder(self.puzzle)
        dlx = builder.build()
        self.solutions = [
            builder.grid_from_solution(row_ids)
            for row_ids in dlx.solve_all(max_solutions=max_solutions)
        ]
        n = len(self.solutions)
        if not n:
            log.error("Unable to solve!")
            self.solved = False
            self.solution_data = None
            return 0
        self.solved = True
        self.solution_data = self.solutions[0]
        if max_solutions is not None and n >= max_solutions:
            msg = f"Found {n} solutions (stopped at the limit of {max_solutions})"  # noqa
        else:
            msg = f"Found {n} solution(s)"
        self.working.append(msg)
        log.info(msg)
        return n

    # -------------------------------------------------------------------------
    # Solve via integer programming
    # -------------------------------------------------------------------------

    def solve_ip(self) -> None:
        """
        Solves the problem via integer programming, writing to
        :attr:`solved` and :attr:`solution_data`.
        """
        if self.solved:
            log.info("Already solved")
            return
        self._check_complete()

        m = Model("Killer Sudoku solver")
        m.verbose = 0
        n = N

        # ~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~
        # Variables
        # ~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~
        x = [
            [
                [
                    m.add_var(f"x(row={r + 1}, col={c + 1}, digit={d + 1})",
                              var_type=BINARY)
                    for d in range(n)
                ] for c in range(n)
            ] for r in range(n)
        ]  # index as: x[row_zb][col_zb][digit_zb]

        # ~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~
        # Constraints
        # ~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~
        # One digit per cell
        for r in range(n):
            for c in range(n):
                m += xsum(x[r][c][d] for d in range(n)) == 1, f"cell(r={r},c={c})"  # noqa
        for d in range(n):
            # One of each digit per row
            for r in range(n):
                m += xsum(x[r][c][d] for c in range(n)) == 1, f"row(r={r},d={d})"  # noqa
            # One of each digit per column
            for c in range(n):
                m += xsum(x[r][c][d] for r in range(n)) == 1, f"col(c={c},d={d})"  # noqa
            # One of each digit in each 3x3 box
            for b in range(n):
                m += xsum(
                    x[r][c][d]
                    for r in range(n)
                    for c in range(n)
                    if box_index_zb(r + 1, c + 1) == b
                ) == 1, f"box(b={b},d={d})"
        # Cages: add up to the total, with no digit repeated
        for k, cage in enumerate(self.puzzle.cages):
            cells = [(cell.row - 1, cell.col - 1) for cell in cage.cells]
            m += xsum(
                (d + 1) * x[r][c][d]
                for r, c in cells
                for d in range(n)
            ) == cage.total, f"cage_sum(k={k})"
            for d in range(n):
                m += xsum(x[r][c][d] for r, c in cells) <= 1, f"cage_distinct(k={k},d={d})"  # noqa
        # Starting values
        for r in range(n):
            for c in range(n):
                given = self.puzzle.given(r + 1, c + 1)
                if given:
                    m += x[r][c][given - 1] == 1

        # ~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~
        # Solve
        # ~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~
        debug_model_constraints(m)
        m.optimize()

        # ~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~
        # Read out answers
        # ~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~
        if m.num_solutions:
            debug_model_vars(m)
            self.solved = True
            self.working.append("Solved via integer programming method")
            self.solution_data = [
                [
                    0 for _c in range(n)
                ] for _r in range(n)
            ]
            for r in range(n):
                for c in range(n):
                    for d_zb in range(n):
                        if x[r][c][d_zb].x > ALMOST_ONE:
                            self.solution_data[r][c] = d_zb + 1
                            break
            self.solutions = [self.solution_data]
            problems = self.puzzle.check_solution(self.solution_data)
            assert not problems, f"Bad solution: {problems}"
        else:
            log.error("Unable to solve!")


# =============================================================================
# main
# =============================================================================

def main() -> None:
    """
    Command-line entry point.
    """
    cmd_demo = "demo"
    cmd_ip = "ip"
    cmd_solve = "solve"

    help_filename = (
        "Puzzle filename to read. Must contain text in format as above.")

    parser = argparse.ArgumentParser(
        formatter_class=RawDescriptionArgumentDefaultsHelpFormatter,
        description=(
            f"Solve Killer Sudoku puzzles. Format is:\n"
            f"{DEMO_KILLER_1}"
        )
    )
    parser.add_argument(
        "--verbose", action="store_true", help="Be verbose")
    subparsers = parser.add_subparsers(
        dest="command",
        help="Append --help for more help")

    parser_solve = subparsers.add_parser(
        cmd_solve, help="Solve from a file (via exact cover)")
    parser_solve.add_argument(
        "filename", type=str, default="", help=help_filename)
    parser_solve.add_argument(
        "--all", action="store_true",
        help="Find more than one solution (up to --max_solutions)")
    parser_solve.add_argument(
        "--max_solutions", type=int, default=DEFAULT_MAX_SOLUTIONS,
        help="With --all, stop after this many solutions")

    parser_ip = subparsers.add_parser(
        cmd_ip, help="Solve from a file (via integer programming)")
    parser_ip.add_argument(
        "filename", type=str, default="", help=help_filename)

    _parser_demo = subparsers.add_parser(cmd_demo, help="Run demo")

    args = parser.parse_args()
    main_only_quicksetup_rootlogger(level=logging.DEBUG if args.verbose
                                    else logging.INFO)

    if not args.command:
        print("Must specify command")
        sys.exit(EXIT_FAILURE)
    if args.command == cmd_demo:
        problem = KillerSudoku(DEMO_KILLER_1)
        log.info(f"Solving:\n{problem}")
        problem.solve()
    else:
        log.info(f"Reading {args.filename}")
        with open(args.filename, "rt") as f:
            string_version = f.read()
        problem = KillerSudoku(string_version)
        log.info(f"Solving:\n{problem}")
        if args.command == cmd_ip:
            problem.solve_ip()
        elif args.all:
            problem.solve_all(max_solutions=args.max_solutions)
        else:
            problem.solve()
    if not problem.solved:
        sys.exit(EXIT_FAILURE)
    log.info(f"Answer:\n{problem}")
    sys.exit(EXIT_SUCCESS)


# =============================================================================
# Command-line entry point
# =============================================================================

if __name__ == "__main__":
    run_guard(main)
