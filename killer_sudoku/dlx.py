#!/usr/bin/env python

"""
killer_sudoku/dlx.py

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

**Exact cover via Knuth's Algorithm X, with dancing links.**

See D. E. Knuth (2000), "Dancing Links", https://arxiv.org/abs/cs/0011047.

The sparse 0/1 matrix is held as a two-dimensional circular doubly linked
list. Rather than node objects pointing at each other, nodes live in an
"arena" of parallel lists and are referred to by integer index:

- node 0 is the root (head) of the ring of column headers;
- nodes 1 to ``n_columns`` are the column headers (column ``j`` is node
  ``j + 1``);
- every subsequent node is a 1 in the matrix, belonging to one row (its
  horizontal ring) and one column (its vertical ring).

Covering and uncovering a column is pure link surgery; nothing is created or
destroyed during the search, so every cover can be undone, provided undoing
happens in reverse (LIFO) order.

"""

import logging
from typing import List, Optional, Sequence, Tuple

log = logging.getLogger(__name__)

HEAD = 0
NO_ROW = -1


class DancingLinks(object):
    """
    Dancing-links exact-cover solver.

    Usage:

    .. code-block:: python

        dlx = DancingLinks(3)
        dlx.add_row(0, [0, 2])
        dlx.add_row(1, [1])
        dlx.solve_first()  # [1, 0]

    The engine knows nothing about what the columns or rows mean; rows are
    identified by the caller's row IDs.

    Not safe for concurrent use; build one engine per thread.
    """

    def __init__(self, n_columns: int,
                 names: Optional[Sequence[str]] = None) -> None:
        """
        Args:
            n_columns: number of columns (constraints)
            names: optional column names, for diagnostics only
        """
        if n_columns < 0:
            raise ValueError(f"Bad number of columns: {n_columns}")
        if names is not None and len(names) != n_columns:
            raise ValueError(f"{len(names)} names given for "
                             f"{n_columns} columns")
        self.n_columns = n_columns
        self.n_rows = 0
        self._names = list(names) if names is not None else [
            str(j) for j in range(n_columns)
        ]

        # Arena. Index as e.g. self._right[node].
        self._left = [HEAD]  # type: List[int]
        self._right = [HEAD]  # type: List[int]
        self._up = [HEAD]  # type: List[int]
        self._down = [HEAD]  # type: List[int]
        self._column = [HEAD]  # type: List[int]  # owning column header
        self._row_id = [NO_ROW]  # type: List[int]
        self._size = [0] * (n_columns + 1)  # index by column header node

        for j in range(n_columns):
            node = j + 1
            # Append to the header ring, just left of the head.
            self._left.append(node - 1)
            self._right.append(HEAD)
            self._right[node - 1] = node
            self._left[HEAD] = node
            # Empty vertical ring.
            self._up.append(node)
            self._down.append(node)
            self._column.append(node)
            self._row_id.append(NO_ROW)

        self.solutions = []  # type: List[List[int]]
        self.nodes_explored = 0

    def __str__(self) -> str:
        return (f"DancingLinks({self.n_columns} columns, {self.n_rows} rows, "
                f"{self.n_nodes} nodes)")

    @property
    def n_nodes(self) -> int:
        """
        Number of 1s in the matrix.
        """
        return len(self._left) - self.n_columns - 1

    def column_name(self, column: int) -> str:
        return self._names[column]

    # -------------------------------------------------------------------------
    # Building the matrix
    # -------------------------------------------------------------------------

    def add_row(self, row_id: int, column_indices: Sequence[int]) -> None:
        """
        Adds a row with 1s in the specified columns.

        Args:
            row_id: caller's identifier, reported back in solutions
            column_indices: zero-based column numbers; an empty sequence
                does nothing

        Raises:
            :exc:`ValueError` for a column out of range, or one mentioned
            twice (which would corrupt the column's vertical ring)
        """
        if not column_indices:
            return
        indices = sorted(column_indices)
        for a, b in zip(indices, indices[1:]):
            if a == b:
                raise ValueError(f"Row {row_id}: column {a} given twice")
        if indices[0] < 0 or indices[-1] >= self.n_columns:
            raise ValueError(
                f"Row {row_id}: columns must be in range 0 to "
                f"{self.n_columns - 1}; were {indices}")

        left, right, up, down = self._left, self._right, self._up, self._down
        first = None  # type: Optional[int]
        for j in indices:
            col = j + 1
            node = len(left)
            # Insert at the bottom of the column, just above the header.
            up.append(up[col])
            down.append(col)
            down[up[col]] = node
            up[col] = node
            self._size[col] += 1
            self._column.append(col)
            self._row_id.append(row_id)
            # Insert at the end of the row's horizontal ring.
            if first is None:
                first = node
                left.append(node)
                right.append(node)
            else:
                left.append(left[first])
                right.append(first)
                right[left[first]] = node
                left[first] = node
        self.n_rows += 1

    # -------------------------------------------------------------------------
    # Cover/uncover
    # -------------------------------------------------------------------------

    def _cover(self, col: int) -> None:
        """
        Removes column header ``col`` from the header ring, and removes every
        row with a 1 in that column from all the other columns it touches.
        """
        left, right, up, down = self._left, self._right, self._up, self._down
        column, size = self._column, self._size
        right[left[col]] = right[col]
        left[right[col]] = left[col]
        i = down[col]
        while i != col:
            j = right[i]
            while j != i:
                up[down[j]] = up[j]
                down[up[j]] = down[j]
                size[column[j]] -= 1
                j = right[j]
            i = down[i]

    def _uncover(self, col: int) -> None:
        """
        Exactly reverses :meth:`_cover`, relinking in the opposite order.
        """
        left, right, up, down = self._left, self._right, self._up, self._down
        column, size = self._column, self._size
        i = up[col]
        while i != col:
            j = left[i]
            while j != i:
                size[column[j]] += 1
                up[down[j]] = j
                down[up[j]] = j
                j = left[j]
            i = up[i]
        right[left[col]] = col
        left[right[col]] = col

    def cover(self, column: int) -> None:
        """
        Covers a column (zero-based column number).
        """
        self._cover(column + 1)

    def uncover(self, column: int) -> None:
        """
        Uncovers a column (zero-based column number). Must be the most
        recently covered column still covered.
        """
        self._uncover(column + 1)

    def link_state(self) -> Tuple[Tuple[int, ...], ...]:
        """
        Snapshot of every node's left/right/up/down links and every column's
        size, for checking that the structure has been restored.
        """
        return (
            tuple(self._left),
            tuple(self._right),
            tuple(self._up),
            tuple(self._down),
            tuple(self._size),
        )

    # -------------------------------------------------------------------------
    # Search
    # -------------------------------------------------------------------------

    def _choose_column(self) -> int:
        """
        Chooses the column with the fewest live rows. Ties go to the first
        such column in the header ring, i.e. the lowest-numbered column.
        """
        right, size = self._right, self._size
        best = HEAD
        best_size = None  # type: Optional[int]
        c = right[HEAD]
        while c != HEAD:
            if best_size is None or size[c] < best_size:
                best = c
                best_size = size[c]
                if best_size == 0:
                    break
            c = right[c]
        return best

    def _search(self, partial: List[int],
                max_solutions: Optional[int]) -> None:
        """
        Recursive Algorithm X.

        Args:
            partial: row IDs chosen so far (a stack)
            max_solutions: stop when we have this many; ``None`` for no
                limit
        """
        if max_solutions is not None and len(self.solutions) >= max_solutions:
            return
        self.nodes_explored += 1
        right, left, down = self._right, self._left, self._down
        column = self._column

        if right[HEAD] == HEAD:
            # Every column covered.
            self.solutions.append(list(partial))
            return

        c = self._choose_column()
        if self._size[c] == 0:
            return  # dead end

        self._cover(c)
        r = down[c]
        while r != c:
            partial.append(self._row_id[r])
            j = right[r]
            while j != r:
                self._cover(column[j])
                j = right[j]

            self._search(partial, max_solutions)

            # Undo, in reverse order.
            j = left[r]
            while j != r:
                self._uncover(column[j])
                j = left[j]
            partial.pop()

            if (max_solutions is not None and
                    len(self.solutions) >= max_solutions):
                break
            r = down[r]
        self._uncover(c)

    def _solve(self, max_solutions: Optional[int]) -> List[List[int]]:
        self.solutions = []
        self.nodes_explored = 0
        self._search([], max_solutions)
        log.debug(f"{self}: explored {self.nodes_explored} search states; "
                  f"found {len(self.solutions)} solution(s)")
        return self.solutions

    def solve_first(self) -> Optional[List[int]]:
        """
        Finds the first solution.

        Returns:
            row IDs of the solution, in the order they were chosen during the
            search, or ``None`` if there is no solution
        """
        solutions = self._solve(max_solutions=1)
        return solutions[0] if solutions else None

    def solve_all(self, max_solutions: Optional[int] = None) \
            -> List[List[int]]:
        """
        Finds solutions, stopping once ``max_solutions`` have been found.

        Args:
            max_solutions: cap; ``None`` for all of them (which may be very
                slow for a loosely constrained problem). Values below 1 are
                treated as 1.

        Returns:
            list of solutions, each a list of row IDs; empty if there is no
            solution
        """
        if max_solutions is not None and max_solutions < 1:
            log.warning(f"max_solutions was {max_solutions}; using 1")
            max_solutions = 1
        return list(self._solve(max_solutions=max_solutions))
