import pytest

from starbattle_hints.constants import STATE_EMPTY, STATE_STAR, STATE_CROSS
from starbattle_hints.errors import PuzzleFormatError
from starbattle_hints.puzzle_handler import (
    board_from_string, board_to_sbn, decode_player_annotations, encode_player_annotations,
    encode_to_sbn, universal_import
)


def test_sbn_round_trip_without_marks(board5):
    sbn = board_to_sbn(board5)
    assert sbn.startswith("551W")
    board = board_from_string(sbn)
    assert board.regions == board5.regions
    assert board.stars_per_unit == 1
    assert board.stars() == [] and board.count_crosses(board.all_cells()) == 0


@pytest.mark.parametrize("size", [5, 10])
def test_sbn_round_trip_with_marks(make_board, size):
    original = make_board(size, stars=[(0, 0)], crosses=[(1, 1), (2, 3), (size - 1, size - 1)])
    sbn = board_to_sbn(original)
    assert sbn[3] == 'e'
    board = board_from_string(sbn)
    assert board.regions == original.regions
    assert board.stars_per_unit == original.stars_per_unit
    assert board.grid == original.grid
    assert board_to_sbn(board) == sbn


def test_anything_after_a_tilde_is_ignored(board5):
    sbn = board_to_sbn(board5)
    assert board_from_string(sbn + "~extra").regions == board5.regions


def test_web_task_string(board5):
    task = ",".join(str(region) for row in board5.regions for region in row)
    puzzle = universal_import(task)
    assert puzzle['task'] == task
    assert puzzle['stars'] == 1
    assert puzzle['player_grid'] == [[STATE_EMPTY] * 5 for _ in range(5)]
    assert board_from_string(task).regions == board5.regions


def test_player_annotations_packing():
    grid = [[STATE_EMPTY] * 5 for _ in range(5)]
    grid[0][0], grid[0][2] = STATE_STAR, STATE_CROSS
    packed = encode_player_annotations(grid)
    assert decode_player_annotations(packed, 5) == grid
    assert encode_player_annotations([[STATE_EMPTY] * 5 for _ in range(5)]) == ""
    assert decode_player_annotations("", 5) == [[STATE_EMPTY] * 5 for _ in range(5)]


def test_unsupported_size_cannot_be_encoded():
    assert encode_to_sbn([[1, 1, 2, 2]] * 4, 1) is None


@pytest.mark.parametrize("text", ["hello", "", "abc,def"])
def test_unrecognised_strings_raise(text):
    with pytest.raises(PuzzleFormatError):
        board_from_string(text)
