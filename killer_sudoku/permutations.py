#!/usr/bin/env python

"""
killer_sudoku/permutations.py

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

**Generates the digit sequences that can fill a cage.**

"""

from typing import Generator, List, Optional, Sequence, Tuple

from killer_sudoku.common import N


def gen_distinct_digit_sequences(
        k: int,
        target: int,
        fixed: Optional[Sequence[int]] = None) \
        -> Generator[Tuple[int, ...], None, None]:
    """
    Generates every ordered sequence of ``k`` distinct digits (1-9) that
    adds up to ``target``.

    Order: position by position, trying digits in ascending order, so
    e.g. for ``k=2, target=4`` we get ``(1, 3)`` then ``(3, 1)``.

    Args:
        k: length of the sequence (the cage size)
        target: required sum
        fixed: optional; a sequence of length ``k``. Where an element is
            non-zero, only that digit is allowed at that position. The
            result is the same as filtering the unrestricted output, in the
            same order.

    Yields nothing (rather than raising) if no sequence exists.
    """
    if k < 1 or k > N:
        return
    if fixed is not None and len(fixed) != k:
        raise ValueError(f"fixed has length {len(fixed)}; should be {k}")
    used = [False] * (N + 1)  # index by digit; element 0 unused
    current = [0] * k  # type: List[int]

    def backtrack(pos: int, remaining: int) \
            -> Generator[Tuple[int, ...], None, None]:
        if pos == k:
            if remaining == 0:
                yield tuple(current)
            return
        if fixed and fixed[pos]:
            candidates = (fixed[pos], )
        else:
            candidates = range(1, N + 1)
        for d in candidates:
            if used[d] or d > remaining:
                # Digits are positive, so too large now is too large later.
                continue
            used[d] = True
            current[pos] = d
            yield from backtrack(pos + 1, remaining - d)
            used[d] = False

    yield from backtrack(0, target)
