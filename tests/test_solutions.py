import pytest

from iqfit.board import Board
from iqfit.solutions import (
    OutputWriteError,
    SolutionSet,
    encode_solutions,
    render_solution,
    write_solutions,
)
from iqfit.solver.utils import int_comma, time_str, validate_solution
from tests.data import L_PAIR_SOLUTIONS


def test_encode_solutions_is_flat_ascii():
    assert encode_solutions(["AAB", "BBA"]) == b"AABBBA"
    assert encode_solutions([]) == b""


def test_render_solution_uses_one_line_per_row_and_blank_separator():
    assert render_solution("AABABB", 3) == "AAB\nABB\n\n"


def test_write_solutions(tmp_path):
    merged = SolutionSet(
        counts=(1, 1), displacements=(0, 6), buffer=b"AABABBBBABAA", record_size=6, width=3
    )
    path = write_solutions(tmp_path / "out" / "solutions.txt", merged, width=merged.width)
    assert path.read_text(encoding="utf-8") == "AAB\nABB\n\nBBA\nBAA\n\n"


def test_write_solutions_reports_unwritable_path(tmp_path):
    target = tmp_path / "taken"
    target.mkdir()
    with pytest.raises(OutputWriteError, match="Could not write"):
        write_solutions(target, ["AABABB"], width=3)


def test_board_rows_and_copy():
    board = Board("B....A", 2, 3)
    assert str(board) == "B....A"
    assert list(board.rows()) == ["B..", "..A"]

    copy = board.copy()
    copy.data[0] = ord("C")
    assert str(board) == "B....A"
    assert str(Board.empty(1, 2)) == ".."


def test_board_rejects_wrong_length():
    with pytest.raises(ValueError):
        Board("...", 2, 2)


def test_validate_solution(l_pair_catalog):
    for solution in L_PAIR_SOLUTIONS:
        assert validate_solution(solution, l_pair_catalog)
    # Wrong length, empty cell, missing piece, piece cells not forming a placement
    assert not validate_solution("AABAB", l_pair_catalog)
    assert not validate_solution("AABAB.", l_pair_catalog)
    assert not validate_solution("AAAAAA", l_pair_catalog)
    assert not validate_solution("ABABAB", l_pair_catalog)


def test_formatting_helpers():
    assert int_comma(1234567) == "1,234,567"
    assert time_str(3725.5) == "01:02:05.50"
