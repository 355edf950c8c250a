# tests/test_killer.py
import pytest

from killer_sudoku.common import IncompletePuzzle
from killer_sudoku.killer import (
    DEMO_KILLER_1,
    KillerSudoku,
    parse_cells,
    parse_puzzle,
)
from killer_sudoku.puzzle import Cell


# =============================================================================
# Parsing
# =============================================================================

def test_parse_cells():
    expected = [Cell(1, 1), Cell(2, 1), Cell(1, 2)]
    assert parse_cells("A1 A2 B1") == expected
    assert parse_cells("a1,a2, b1") == expected
    assert parse_cells("A1A2B1") == expected
    assert parse_cells("A1-A2-B1") == expected


def test_parse_cells_errors():
    for bad in ["", "   ", "A1 A", "A1 Z9", "A1 A0"]:
        with pytest.raises(ValueError):
            parse_cells(bad)


def test_parse_puzzle():
    p = parse_puzzle("""
        # comment
        12: A1 A2 B1
        5: C1
        D1 = 4
    """)
    assert len(p.cages) == 2
    assert p.cages[0].total == 12
    assert p.cages[0].cells == [Cell(1, 1), Cell(2, 1), Cell(1, 2)]
    assert p.given(1, 4) == 4
    assert p.given(1, 3) == 0


def test_parse_puzzle_errors():
    with pytest.raises(ValueError, match="Line 2"):
        parse_puzzle("3: A1 B1\nnonsense\n")
    with pytest.raises(ValueError, match="already in a cage"):
        parse_puzzle("3: A1 B1\n4: B1 C1\n")
    with pytest.raises(ValueError):
        parse_puzzle("A1 = 10\n3: A1 B1\n")
    with pytest.raises(ValueError):
        parse_puzzle("0: A1\n")
    with pytest.raises(ValueError, match="No cages"):
        parse_puzzle("# nothing\n")


# =============================================================================
# Rendering
# =============================================================================

def test_problem_str():
    problem = KillerSudoku(DEMO_KILLER_1)
    text = str(problem)
    lines = text.splitlines()
    assert lines[0] == "   A B C  D E F  G H I"
    assert lines[1] == "1  . . .  . . .  . . ."
    assert "Cage 1 (sum 8): A1 B1" in lines
    assert "Cage 38 (sum 17): G9 H9 I9" in lines


def test_given_shown_in_problem_str():
    problem = KillerSudoku(DEMO_KILLER_1 + "\nA1 = 5\n")
    assert problem.problem_str().splitlines()[1] == "1  5 . .  . . .  . . ."


# =============================================================================
# Solving
# =============================================================================

def test_solve_demo(solved_grid):
    problem = KillerSudoku(DEMO_KILLER_1)
    problem.solve()
    assert problem.solved
    assert problem.puzzle.check_solution(problem.solution_data) == []
    assert problem.solutions == [problem.solution_data]
    lines = str(problem).splitlines()
    assert lines[0] == "   A B C  D E F  G H I"
    assert "." not in "".join(lines[1:])
    problem.solve()  # already solved; nothing changes
    assert problem.solved


def test_solve_ip_demo():
    problem = KillerSudoku(DEMO_KILLER_1)
    problem.solve_ip()
    assert problem.solved
    assert problem.puzzle.check_solution(problem.solution_data) == []


def test_solve_all_is_capped(four_solution_text):
    problem = KillerSudoku(four_solution_text)
    assert problem.solve_all(max_solutions=3) == 3
    assert len(problem.solutions) == 3
    assert problem.solve_all(max_solutions=None) == 4
    grids = problem.solutions
    assert len(set(str(g) for g in grids)) == 4
    for grid in grids:
        assert problem.puzzle.check_solution(grid) == []
    assert problem.solution_data == grids[0]
    assert "Solution 4 of 4:" in problem.solution_str()


def test_unsolvable_is_not_an_error():
    text = DEMO_KILLER_1.replace("8: A1 B1", "1: A1 B1")
    problem = KillerSudoku(text)
    problem.solve()
    assert not problem.solved
    assert problem.solve_all() == 0
    assert problem.solutions == []


def test_incomplete_puzzle_rejected():
    text = DEMO_KILLER_1.replace("17: G9 H9 I9", "8: G9 H9")
    problem = KillerSudoku(text)
    with pytest.raises(IncompletePuzzle, match="I9"):
        problem.solve()
    with pytest.raises(IncompletePuzzle):
        problem.solve_all()
    with pytest.raises(IncompletePuzzle):
        problem.solve_ip()
    assert not problem.solved
