import numpy as np
import pytest

from goterritory.board import EMPTY, BLACK, WHITE, BoardPosition, ScoringInternalError
from goterritory import connection
from goterritory.chains import mark_chains, mark_macrochains
from goterritory.connection import mark_connection_blocks
from goterritory.diagram import parse_diagram
from goterritory.eyes import EyeInfo, find_recursively_adjacent_points
from goterritory.eyevalue import get_pieces, is_pseudo_legal, count_adjacents_in, mark_eye_values
from goterritory.reach import mark_reachability
from goterritory.regions import mark_regions
from goterritory.scoring import analyze

WALLED_HALVES = """
. x o . .
. x o . .
. x o . .
. x o . .
"""

SINGLE_EYE = """
. x o .
x x o .
o o o .
. . . .
"""

EIGHT_DEAD = """
O O O O x .
O O O O x .
x x x x x .
. . . . . .
"""


def make_board(diagram):
    (stones, marked_dead) = parse_diagram(diagram)
    return BoardPosition.from_grids(stones, marked_dead)


def eye_at(analysis, x, y):
    eye_id = int(analysis.eye_ids[analysis.board.loc(x, y)])
    assert eye_id != -1
    return analysis.eye_infos_by_id[eye_id]


def test_connection_blocks_along_edge():
    board = make_board(WALLED_HALVES)
    connection_blocks = mark_connection_blocks(board)
    for y in range(4):
        assert connection_blocks[board.loc(0, y)] == BLACK
        #Blocks are only ever placed on empty points
        assert connection_blocks[board.loc(1, y)] == EMPTY
        assert connection_blocks[board.loc(2, y)] == EMPTY


def test_connection_blocks_empty_board():
    board = make_board("...\n...\n...")
    assert np.count_nonzero(mark_connection_blocks(board)) == 0


def test_strict_reachability():
    board = make_board("x . o .\n. x o .")
    (reaches_black, reaches_white) = mark_reachability(board)
    assert board.to_grid(reaches_black) == [
        [True, True, False, False],
        [True, True, False, False],
    ]
    assert board.to_grid(reaches_white) == [
        [False, True, True, True],
        [False, False, True, True],
    ]


def test_reachability_passes_through_dead_stones():
    board = make_board("x O .\n. . .")
    (reaches_black, reaches_white) = mark_reachability(board)
    assert all(reaches_black)
    assert not any(reaches_white)


def test_regions_walled_halves():
    board = make_board(WALLED_HALVES)
    connection_blocks = mark_connection_blocks(board)
    (reaches_black, reaches_white) = mark_reachability(board, connection_blocks)
    (region_ids, region_infos_by_id) = mark_regions(board, connection_blocks, reaches_black, reaches_white)

    assert len(region_infos_by_id) == 2
    black_region = int(region_ids[board.loc(0, 0)])
    white_region = int(region_ids[board.loc(4, 0)])
    assert region_infos_by_id[black_region].color == BLACK
    assert region_infos_by_id[white_region].color == WHITE
    for y in range(4):
        assert region_ids[board.loc(0, y)] == black_region
        assert region_ids[board.loc(1, y)] == black_region
        for x in range(2, 5):
            assert region_ids[board.loc(x, y)] == white_region


def test_regions_empty_board_is_all_dame():
    board = make_board("...\n...\n...")
    connection_blocks = mark_connection_blocks(board)
    (reaches_black, reaches_white) = mark_reachability(board, connection_blocks)
    (region_ids, region_infos_by_id) = mark_regions(board, connection_blocks, reaches_black, reaches_white)
    assert len(region_infos_by_id) == 0
    assert np.all(region_ids == -1)


def test_chains_and_liberties():
    analysis = analyze(*parse_diagram(WALLED_HALVES))
    board = analysis.board
    assert len(analysis.chain_infos_by_id) == 4

    black_chain = analysis.chain_infos_by_id[int(analysis.chain_ids[board.loc(1, 0)])]
    assert black_chain.color == BLACK
    assert not black_chain.is_marked_dead
    assert sorted(black_chain.points) == [board.loc(1, y) for y in range(4)]
    assert black_chain.liberties == set(board.loc(0, y) for y in range(4))
    assert len(black_chain.neighbors) == 2

    white_chain = analysis.chain_infos_by_id[int(analysis.chain_ids[board.loc(2, 0)])]
    assert white_chain.liberties == set(board.loc(3, y) for y in range(4))
    assert white_chain.chain_id in black_chain.neighbors
    assert black_chain.chain_id in white_chain.neighbors


def test_dead_stones_form_their_own_chain():
    analysis = analyze(*parse_diagram(EIGHT_DEAD))
    board = analysis.board
    dead_chain = analysis.chain_infos_by_id[int(analysis.chain_ids[board.loc(0, 0)])]
    assert dead_chain.color == WHITE
    assert dead_chain.is_marked_dead
    assert len(dead_chain.points) == 8
    assert dead_chain.region_id == int(analysis.region_ids[board.loc(0, 0)])


def test_macrochains():
    analysis = analyze(*parse_diagram(WALLED_HALVES))
    board = analysis.board
    assert len(analysis.macrochain_infos_by_id) == 2
    black_macrochain = int(analysis.macrochain_ids[board.loc(1, 0)])
    white_macrochain = int(analysis.macrochain_ids[board.loc(2, 0)])
    #Black macrochains are numbered first
    assert black_macrochain < white_macrochain
    assert analysis.macrochain_infos_by_id[black_macrochain].color == BLACK
    assert analysis.macrochain_infos_by_id[white_macrochain].color == WHITE
    assert analysis.macrochain_ids[board.loc(0, 0)] == -1


def test_potential_eyes():
    analysis = analyze(*parse_diagram(WALLED_HALVES))
    board = analysis.board
    assert len(analysis.eye_infos_by_id) == 2

    black_eye = eye_at(analysis, 0, 0)
    black_macrochain = int(analysis.macrochain_ids[board.loc(1, 0)])
    assert black_eye.pla == BLACK
    assert black_eye.potential_points == set(board.loc(0, y) for y in range(4))
    assert set(black_eye.macrochain_neighbors_from) == {black_macrochain}
    assert black_eye.macrochain_neighbors_from[black_macrochain] == set(board.loc(0, y) for y in range(4))
    assert not black_eye.is_loose

    eye_neighbors = analysis.macrochain_infos_by_id[black_macrochain].eye_neighbors_from
    assert eye_neighbors[black_eye.eye_id] == set(board.loc(1, y) for y in range(4))

    region_info = analysis.region_infos_by_id[black_eye.region_id]
    assert region_info.eyes == {black_eye.eye_id}

    white_eye = eye_at(analysis, 4, 3)
    assert white_eye.pla == WHITE
    assert len(white_eye.potential_points) == 8


def test_no_false_eyes_in_solid_eyes():
    analysis = analyze(*parse_diagram(WALLED_HALVES))
    assert not np.any(analysis.is_false_eye_point)
    assert not np.any(analysis.is_unscorable_false_eye_point)


def test_eye_values():
    analysis = analyze(*parse_diagram(WALLED_HALVES))
    assert eye_at(analysis, 0, 0).eye_value == 2
    assert eye_at(analysis, 3, 0).eye_value == 2
    assert eye_at(analysis, 0, 0).real_points == eye_at(analysis, 0, 0).potential_points


def test_single_point_eye_has_value_one():
    analysis = analyze(*parse_diagram(SINGLE_EYE))
    board = analysis.board
    eye = eye_at(analysis, 0, 0)
    assert eye.pla == BLACK
    assert eye.potential_points == {board.loc(0, 0)}
    assert eye.eye_value == 1
    assert eye_at(analysis, 3, 3).eye_value == 2


def test_eight_dead_stones_make_two_eyes():
    analysis = analyze(*parse_diagram(EIGHT_DEAD))
    eye = eye_at(analysis, 0, 0)
    assert eye.pla == BLACK
    assert len(eye.potential_points) == 8
    assert eye.eye_value == 2


def test_get_pieces():
    board = make_board(". . .\n. . .")
    points = set(range(board.arrsize))
    assert len(get_pieces(board, points, set())) == 1
    pieces = get_pieces(board, points, {board.loc(1, 0), board.loc(1, 1)})
    assert sorted(sorted(piece) for piece in pieces) == [
        [board.loc(0, 0), board.loc(0, 1)],
        [board.loc(2, 0), board.loc(2, 1)],
    ]
    assert count_adjacents_in(board, board.loc(1, 0), points) == 3


def test_find_recursively_adjacent_points():
    board = make_board(". . . .")
    within = set(range(4))
    assert find_recursively_adjacent_points(board, within, [0], set()) == within
    assert find_recursively_adjacent_points(board, within, [0], {2}) == {0, 1}
    assert find_recursively_adjacent_points(board, within, [2], {2}) == set()


def test_is_pseudo_legal():
    analysis = analyze(*parse_diagram(". o .\no x o\n. o ."))
    board = analysis.board
    args = (board, analysis.chain_ids, analysis.chain_infos_by_id)
    #Occupied
    assert not is_pseudo_legal(*args, board.loc(1, 1), WHITE)
    #Every neighbor is a white stone with two liberties
    assert not is_pseudo_legal(*args, board.loc(0, 0), BLACK)
    assert is_pseudo_legal(*args, board.loc(0, 0), WHITE)


def test_internal_check_on_live_stone_without_region():
    board = make_board("x .")
    region_ids = board.new_grid(-1, np.int32)
    with pytest.raises(ScoringInternalError):
        mark_chains(board, region_ids)


def test_internal_check_on_live_chain_without_region():
    board = make_board("x .")
    region_ids = board.new_grid(-1, np.int32)
    (chain_ids, chain_infos_by_id) = mark_chains(board, board.new_grid(0, np.int32))
    for chain_info in chain_infos_by_id.values():
        chain_info.region_id = -1
    with pytest.raises(ScoringInternalError):
        mark_macrochains(board, board.new_grid(EMPTY, np.int8), region_ids, chain_ids, chain_infos_by_id)


@pytest.mark.parametrize("diagram,x,y", [
    ("x x\n. .\nx .", 0, 1),
    (". x .\n. . .\n. x .", 1, 1),
    ("x . .\n. . x\nx . .", 1, 1),
])
def test_connection_blocks_interior_shapes(diagram, x, y):
    board = make_board(diagram)
    assert mark_connection_blocks(board)[board.loc(x, y)] == BLACK


def test_connection_block_stops_blocked_reach():
    board = make_board(". o . .\n. . . x\n. o . .")
    connection_blocks = mark_connection_blocks(board)
    assert connection_blocks[board.loc(1, 1)] == WHITE

    (strict_reaches_black, _) = mark_reachability(board)
    (reaches_black, _) = mark_reachability(board, connection_blocks)
    assert strict_reaches_black[board.loc(0, 1)]
    assert reaches_black[board.loc(1, 1)]
    assert not reaches_black[board.loc(0, 1)]


def test_loose_eye():
    analysis = analyze(*parse_diagram(". o . .\n. . . x\n. o . ."))
    eye = eye_at(analysis, 0, 1)
    assert eye.pla == WHITE
    assert eye.is_loose
    assert analysis.board.loc(1, 1) not in eye.potential_points


def test_invalid_connection_pattern_char(monkeypatch):
    monkeypatch.setattr(connection, "CONNECTION_BLOCK_PATTERNS", [["z"]])
    with pytest.raises(ScoringInternalError):
        mark_connection_blocks(make_board("x ."))


def eye_value_of(diagram, potential, throwins=()):
    """Eye value for black of the given eye points, where throwins are extra opponent stones in the eye
    already judged false."""
    board = make_board(diagram)
    (chain_ids, chain_infos_by_id) = mark_chains(board, board.new_grid(0, np.int32))
    is_false_eye_point = board.new_grid(False, bool)
    potential_points = set(board.loc(x, y) for (x, y) in potential)
    for (x, y) in throwins:
        is_false_eye_point[board.loc(x, y)] = True
        potential_points.add(board.loc(x, y))
    eye_info = EyeInfo(BLACK, 0, 0, potential_points, set(), {}, False, 0)
    mark_eye_values(board, chain_ids, chain_infos_by_id, is_false_eye_point, {0: eye_info})
    return eye_info.eye_value


#Dead stones with an empty non-eye point above and below, so none of them is secure on its own
DEAD_LINE = """
. . . . .
O O O O O
. . . . .
O . . . .
"""

def test_five_dead_stones_make_one_eye():
    assert eye_value_of(DEAD_LINE, [(x, 1) for x in range(5)], throwins=[(0, 3)]) == 1
    assert eye_value_of(DEAD_LINE, [(x, 1) for x in range(4)], throwins=[(0, 3)]) == 0


DEAD_BLOCK = """
x x x x x x
x O O O O x
x O O O O x
x x x x x x
O O x x x x
"""

DEAD_BLOCK_MISSING_CORNER = """
x x x x x x
x x O O O x
x O O O O x
x x x x x x
O O x x x x
"""

def test_eight_dead_stones_make_two_eyes_seven_do_not():
    block = [(x, y) for y in [1, 2] for x in range(1, 5)]
    assert eye_value_of(DEAD_BLOCK, block, throwins=[(0, 4), (1, 4)]) == 2
    missing_corner = [loc for loc in block if loc != (1, 1)]
    assert eye_value_of(DEAD_BLOCK_MISSING_CORNER, missing_corner, throwins=[(0, 4), (1, 4)]) == 1


def test_dead_shape_size_bonus():
    missing_corner = [(x, y) for y in [1, 2] for x in range(1, 5) if (x, y) != (1, 1)]
    #Seven dead stones, one throw-in: the large shape bonus is what tips this to two eyes
    assert eye_value_of(DEAD_BLOCK_MISSING_CORNER, missing_corner, throwins=[(0, 4)]) == 2


def test_dead_shape_below_size_bonus():
    diagram = """
    x x x x x
    x O O O x
    x x O x x
    x x O x x
    x x O x x
    O x x x x
    """
    t_shape = [(1, 1), (2, 1), (3, 1), (2, 2), (2, 3), (2, 4)]
    assert eye_value_of(diagram, t_shape, throwins=[(0, 5)]) == 1


#Isolated dead stones all count as safe points
SCATTERED_DEAD = """
O x O x O x O x O x O
x x x x x x x x x x x
O O O O O x x x x x x
"""

def test_six_safe_points_make_two_eyes():
    throwins = [(x, 2) for x in range(5)]
    assert eye_value_of(SCATTERED_DEAD, [(x, 0) for x in range(0, 11, 2)], throwins=throwins) == 2
    assert eye_value_of(SCATTERED_DEAD, [(x, 0) for x in range(0, 9, 2)], throwins=throwins) == 1


def test_branching_points_make_two_eyes():
    square = [(x, y) for y in range(1, 4) for x in range(1, 4)]
    #Center counts twice and each edge midpoint once
    assert eye_value_of("\n".join([". . . . ."] * 5), square) == 2
    #A dead stone on one edge midpoint takes its branch away
    diagram = """
    . . . . .
    . . O . .
    . . . . .
    . . . . .
    . . . . .
    """
    assert eye_value_of(diagram, square) == 1


def test_splitting_branch_pair():
    rect = [(x, y) for y in [1, 2] for x in range(1, 4)]
    #Filling (2,1) and (2,2) leaves two secure points on the left and one on the right
    diagram = """
    x x x x x
    x . . . .
    x . . . x
    x x x x x
    """
    assert eye_value_of(diagram, rect) == 2
    #With the right side open on both points, nothing secure is left there
    diagram = """
    x x x x x
    x . . . .
    x . . . .
    x x x x x
    """
    assert eye_value_of(diagram, rect) == 1
