# tests/test_dlx.py
import pytest

from killer_sudoku.dlx import DancingLinks

# Knuth's example from "Dancing Links": columns A-G, unique solution
# {A, D}, {B, G}, {C, E, F}.
KNUTH_COLUMNS = list("ABCDEFG")
KNUTH_ROWS = {
    1: [2, 4, 5],  # C E F
    2: [0, 3, 6],  # A D G
    3: [1, 2, 5],  # B C F
    4: [0, 3],  # A D
    5: [1, 6],  # B G
    6: [3, 4, 6],  # D E G
}


def make_knuth() -> DancingLinks:
    dlx = DancingLinks(len(KNUTH_COLUMNS), names=KNUTH_COLUMNS)
    for row_id, columns in KNUTH_ROWS.items():
        dlx.add_row(row_id, columns)
    return dlx


def make_nine_solutions() -> DancingLinks:
    # Rows 0-2 each cover column 0; rows 3-5 each cover column 1.
    dlx = DancingLinks(2)
    for row_id in range(6):
        dlx.add_row(row_id, [row_id // 3])
    return dlx


# =============================================================================
# Construction
# =============================================================================

def test_construction():
    dlx = make_knuth()
    assert dlx.n_columns == 7
    assert dlx.n_rows == 6
    assert dlx.n_nodes == 16
    assert dlx.column_name(3) == "D"


def test_default_names():
    assert DancingLinks(3).column_name(2) == "2"


def test_bad_construction():
    with pytest.raises(ValueError):
        DancingLinks(-1)
    with pytest.raises(ValueError):
        DancingLinks(3, names=["a", "b"])


def test_empty_row_is_a_no_op():
    dlx = DancingLinks(3)
    before = dlx.link_state()
    dlx.add_row(0, [])
    assert dlx.n_rows == 0
    assert dlx.link_state() == before


def test_bad_rows_rejected():
    dlx = DancingLinks(3)
    with pytest.raises(ValueError):
        dlx.add_row(0, [0, 3])
    with pytest.raises(ValueError):
        dlx.add_row(0, [-1])
    with pytest.raises(ValueError):
        dlx.add_row(0, [1, 1])
    assert dlx.n_rows == 0


# =============================================================================
# Cover/uncover
# =============================================================================

def test_cover_then_uncover_restores_everything():
    dlx = make_knuth()
    original = dlx.link_state()
    for column in range(dlx.n_columns):
        dlx.cover(column)
        assert dlx.link_state() != original
        dlx.uncover(column)
        assert dlx.link_state() == original


def test_nested_cover_uncover():
    dlx = make_knuth()
    original = dlx.link_state()
    dlx.cover(0)
    dlx.cover(3)
    dlx.cover(6)
    dlx.uncover(6)
    dlx.uncover(3)
    dlx.uncover(0)
    assert dlx.link_state() == original


def test_cover_removes_conflicting_rows():
    dlx = make_knuth()
    sizes = dlx.link_state()[4]  # indexed by column + 1
    assert sizes[3 + 1] == 3  # D: rows 2, 4, 6
    dlx.cover(0)  # A: rows 2 and 4 go
    sizes = dlx.link_state()[4]
    assert sizes[3 + 1] == 1
    assert sizes[6 + 1] == 2  # G: rows 5, 6 remain


# =============================================================================
# Search
# =============================================================================

def test_knuth_example():
    dlx = make_knuth()
    assert dlx.solve_first() == [4, 1, 5]
    assert dlx.solve_all() == [[4, 1, 5]]


def test_search_restores_structure():
    dlx = make_knuth()
    original = dlx.link_state()
    dlx.solve_first()
    assert dlx.link_state() == original
    dlx.solve_all()
    assert dlx.link_state() == original
    dlx = make_nine_solutions()
    original = dlx.link_state()
    dlx.solve_all(max_solutions=4)
    assert dlx.link_state() == original


def test_first_solution_is_deterministic():
    dlx = make_knuth()
    assert dlx.solve_first() == dlx.solve_first()
    assert make_nine_solutions().solve_first() == [0, 3]


def test_no_solution():
    dlx = DancingLinks(2)
    dlx.add_row(0, [0])  # nothing covers column 1
    assert dlx.solve_first() is None
    assert dlx.solve_all() == []


def test_no_columns_means_empty_solution():
    assert DancingLinks(0).solve_first() == []


def test_all_solutions_in_order():
    dlx = make_nine_solutions()
    assert dlx.solve_all() == [[a, b] for a in range(3) for b in range(3, 6)]


def test_solution_cap():
    dlx = make_nine_solutions()
    assert dlx.solve_all(max_solutions=3) == [[0, 3], [0, 4], [0, 5]]
    assert len(dlx.solve_all(max_solutions=20)) == 9
    assert dlx.solve_all(max_solutions=0) == [[0, 3]]


def test_cap_stops_exploring():
    dlx = make_nine_solutions()
    dlx.solve_first()
    assert dlx.nodes_explored == 3
    dlx.solve_all(max_solutions=3)
    assert dlx.nodes_explored == 5
    dlx.solve_all()
    assert dlx.nodes_explored == 13


def test_solutions_do_not_accumulate_between_calls():
    dlx = make_nine_solutions()
    dlx.solve_all(max_solutions=2)
    assert len(dlx.solve_all(max_solutions=2)) == 2
    assert len(dlx.solutions) == 2


def test_row_order_does_not_matter():
    dlx = DancingLinks(3)
    dlx.add_row(7, [2, 0])
    dlx.add_row(8, [1])
    assert dlx.solve_first() == [7, 8]
