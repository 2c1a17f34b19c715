"""Adapted from goscorer by lightvector (https://github.com/lightvector/goscorer), released under the MIT license."""

import logging
from dataclasses import dataclass, field
from typing import List, Set, Optional

from goterritory.board import EMPTY, get_opp

# Tuned thresholds for the eye value heuristics. Changing any of these changes scoring results.
DEAD_STONES_FOR_ONE_EYE = 5
DEAD_STONES_FOR_TWO_EYES = 8
SAFE_POINTS_FOR_TWO_EYES = 6
BRANCHING_FOR_TWO_EYES = 6
LARGE_DEAD_SHAPE_SIZE = 7

# Cost recorded for a neighbor that the opponent can never usefully fill
UNBLOCKABLE = 1000

@dataclass
class EyePointInfo:
    adj_points: List[int] = field(default_factory=list)
    adj_eye_points: List[int] = field(default_factory=list)
    num_empty_adj_points: int = 0
    num_empty_adj_false_points: int = 0
    num_empty_adj_eye_points: int = 0
    num_opp_adj_false_points: int = 0
    is_false_eye_poke: bool = False
    #How many opponent moves it takes to stop this point from being an eye point
    num_moves_to_block: int = 0


def get_pieces(board, points: Set[int], points_to_delete: Set[int]) -> List[Set[int]]:
    """Split points, minus points_to_delete, into orthogonally connected pieces."""
    used_points = set()
    pieces = []
    for point in points:
        if point in used_points or point in points_to_delete:
            continue
        piece = set()
        stack = [point]
        while stack:
            loc = stack.pop()
            if loc in used_points or loc in points_to_delete:
                continue
            used_points.add(loc)
            piece.add(loc)
            for adj in board.adj[loc]:
                if adj in points:
                    stack.append(adj)
        pieces.append(piece)
    return pieces


def is_pseudo_legal(board, chain_ids, chain_infos_by_id, loc, pla) -> bool:
    """Could pla play here, ignoring ko: the point is empty and some neighbor is not an opponent stone,
    or is an opponent chain in atari."""
    stones = board.stones
    if stones[loc] != EMPTY:
        return False
    opp = get_opp(pla)
    for adj in board.adj[loc]:
        if stones[adj] != opp:
            return True
        if len(chain_infos_by_id[int(chain_ids[adj])].liberties) <= 1:
            return True
    return False


def count_adjacents_in(board, loc, points) -> int:
    count = 0
    for adj in board.adj[loc]:
        if adj in points:
            count += 1
    return count


def mark_eye_values(
    board,
    chain_ids,
    chain_infos_by_id,
    is_false_eye_point,
    eye_infos_by_id, # mutated, real_points and eye_value are filled in
):
    """Fill in real_points and an eye value of 0, 1, or 2 for every eye, roughly how many
    independent eyes the defender can be sure of making there."""
    for eye_id, eye_info in eye_infos_by_id.items():
        eye_info.real_points = set(loc for loc in eye_info.potential_points if not is_false_eye_point[loc])
        eye_info.eye_value = _compute_eye_value(board, chain_ids, chain_infos_by_id, is_false_eye_point, eye_info)

    logging.debug("Eye values: %s", {eye_id: eye_info.eye_value for eye_id, eye_info in eye_infos_by_id.items()})


def _compute_point_infos(board, is_false_eye_point, eye_info):
    stones = board.stones
    opp = get_opp(eye_info.pla)
    real_points = eye_info.real_points

    info_by_point = {}
    for loc in real_points:
        info = EyePointInfo()
        for adj in board.adj[loc]:
            info.adj_points.append(adj)
            if adj in real_points:
                info.adj_eye_points.append(adj)
        info_by_point[loc] = info

    for loc, info in info_by_point.items():
        for adj in info.adj_points:
            if stones[adj] == EMPTY:
                info.num_empty_adj_points += 1
            if stones[adj] == EMPTY and adj in real_points:
                info.num_empty_adj_eye_points += 1
            if stones[adj] == EMPTY and is_false_eye_point[adj]:
                info.num_empty_adj_false_points += 1
            if stones[adj] == opp and is_false_eye_point[adj]:
                info.num_opp_adj_false_points += 1

        if info.num_opp_adj_false_points > 0 and stones[loc] == opp:
            info.is_false_eye_poke = True
        if info.num_empty_adj_false_points >= 2 and stones[loc] == opp:
            info.is_false_eye_poke = True

    for loc, info in info_by_point.items():
        info.num_moves_to_block = 0
        for adj in info.adj_points:
            block = 0
            adj_info = info_by_point.get(adj)
            if stones[adj] == EMPTY and adj not in real_points:
                block = 1
            if stones[adj] == EMPTY and adj_info is not None and adj_info.num_opp_adj_false_points >= 1:
                block = 1
            if stones[adj] == opp and adj_info is not None and adj_info.num_empty_adj_false_points >= 1:
                block = 1
            if stones[adj] == opp and is_false_eye_point[adj]:
                block = UNBLOCKABLE
            if stones[adj] == opp and adj_info is not None and adj_info.is_false_eye_poke:
                block = UNBLOCKABLE

            info.num_moves_to_block += block

    return info_by_point


def _compute_eye_value(board, chain_ids, chain_infos_by_id, is_false_eye_point, eye_info):
    stones = board.stones
    marked_dead = board.marked_dead
    pla = eye_info.pla
    opp = get_opp(pla)
    real_points = eye_info.real_points
    info_by_point = _compute_point_infos(board, is_false_eye_point, eye_info)

    def count(predicate):
        return sum(1 for loc in real_points if predicate(loc))

    eye_value = 0
    if count(lambda loc: info_by_point[loc].num_moves_to_block <= 1) >= 1:
        eye_value = 1

    #Defender moves that split the eye into several pieces that each hold a secure point
    for dloc in real_points:
        if not is_pseudo_legal(board, chain_ids, chain_infos_by_id, dloc, pla):
            continue

        pieces = get_pieces(board, real_points, {dloc})
        if len(pieces) < 2:
            continue

        should_bonus = info_by_point[dloc].num_opp_adj_false_points == 1
        num_definite_eye_pieces = 0
        for piece in pieces:
            zero_moves_to_block = False
            for loc in piece:
                if info_by_point[loc].num_moves_to_block <= 0:
                    zero_moves_to_block = True
                    break
                if should_bonus and info_by_point[loc].num_moves_to_block <= 1:
                    zero_moves_to_block = True
                    break

            if zero_moves_to_block:
                num_definite_eye_pieces += 1
        eye_value = max(eye_value, num_definite_eye_pieces)

    marked_dead_count = count(lambda loc: stones[loc] == opp and marked_dead[loc])
    if marked_dead_count >= DEAD_STONES_FOR_ONE_EYE:
        eye_value = max(eye_value, 1)
    if marked_dead_count >= DEAD_STONES_FOR_TWO_EYES:
        eye_value = max(eye_value, 2)

    if eye_value < 2 and (
        len(real_points)
        - count(lambda loc: info_by_point[loc].num_moves_to_block >= 1)
        - count(lambda loc: info_by_point[loc].num_moves_to_block >= 2)
        - count(lambda loc: stones[loc] == opp and len(info_by_point[loc].adj_eye_points) >= 2)
        >= SAFE_POINTS_FOR_TWO_EYES
    ):
        eye_value = max(eye_value, 2)

    if eye_value < 2 and (
        count(lambda loc: stones[loc] == EMPTY and len(info_by_point[loc].adj_eye_points) >= 4)
        + count(lambda loc: stones[loc] == EMPTY and len(info_by_point[loc].adj_eye_points) >= 3)
        >= BRANCHING_FOR_TWO_EYES
    ):
        eye_value = max(eye_value, 2)

    if eye_value < 2 and _has_splitting_branch_pair(board, chain_ids, chain_infos_by_id, eye_info, info_by_point):
        eye_value = 2

    if eye_value < 2 and _dead_stones_always_leave_two_eyes(board, chain_ids, chain_infos_by_id, is_false_eye_point, eye_info):
        eye_value = 2

    return min(eye_value, 2)


def _has_splitting_branch_pair(board, chain_ids, chain_infos_by_id, eye_info, info_by_point):
    """Two adjacent branching points the defender could fill to cut the eye into pieces, at least one of
    which has two secure points."""
    stones = board.stones
    pla = eye_info.pla
    real_points = eye_info.real_points

    for dloc in real_points:
        if stones[dloc] != EMPTY:
            continue
        if board.is_on_border(dloc):
            continue
        if not is_pseudo_legal(board, chain_ids, chain_infos_by_id, dloc, pla):
            continue

        info1 = info_by_point[dloc]
        if info1.num_moves_to_block > 1 or len(info1.adj_eye_points) < 3:
            continue

        for dloc2 in info1.adj_eye_points:
            info2 = info_by_point[dloc2]
            if len(info2.adj_eye_points) < 3:
                continue
            if info2.num_moves_to_block > 1:
                continue
            if stones[dloc2] != EMPTY and info2.num_empty_adj_eye_points <= 1:
                continue

            pieces = get_pieces(board, real_points, {dloc, dloc2})
            if len(pieces) < 2:
                continue

            num_definite_eye_pieces = 0
            num_double_definite_eye_pieces = 0
            for piece in pieces:
                num_zero_moves_to_block = 0
                for loc in piece:
                    if info_by_point[loc].num_moves_to_block <= 0:
                        num_zero_moves_to_block += 1
                        if num_zero_moves_to_block >= 2:
                            break
                if num_zero_moves_to_block >= 1:
                    num_definite_eye_pieces += 1
                if num_zero_moves_to_block >= 2:
                    num_double_definite_eye_pieces += 1

            if (
                num_definite_eye_pieces >= 2 and
                num_double_definite_eye_pieces >= 1 and
                (stones[dloc2] == EMPTY or num_double_definite_eye_pieces >= 2)
            ):
                return True

    return False


def _dead_stones_always_leave_two_eyes(board, chain_ids, chain_infos_by_id, is_false_eye_point, eye_info):
    """With dead opponent stones in the eye, check that whichever single unplayable point the attacker
    manages to keep, the shape left after capturing still makes two eyes."""
    stones = board.stones
    marked_dead = board.marked_dead
    pla = eye_info.pla
    opp = get_opp(pla)

    dead_opps_in_eye = set()
    unplayable_in_eye = []
    for loc in eye_info.real_points:
        if stones[loc] == opp and marked_dead[loc]:
            dead_opps_in_eye.add(loc)
        elif not is_pseudo_legal(board, chain_ids, chain_infos_by_id, loc, pla):
            unplayable_in_eye.append(loc)

    if len(dead_opps_in_eye) <= 0:
        return False

    num_throwins = 0
    for loc in eye_info.potential_points:
        if stones[loc] == opp and is_false_eye_point[loc]:
            num_throwins += 1

    possible_omissions: List[Optional[int]] = list(unplayable_in_eye)
    possible_omissions.append(None)
    for omitted in possible_omissions:
        remaining_shape = set(dead_opps_in_eye)
        for loc in unplayable_in_eye:
            if loc != omitted:
                remaining_shape.add(loc)

        initial_piece_count = len(get_pieces(board, remaining_shape, set()))
        num_bottlenecks = 0
        num_non_bottlenecks_high_degree = 0
        for loc_to_delete in remaining_shape:
            if len(get_pieces(board, remaining_shape, {loc_to_delete})) > initial_piece_count:
                num_bottlenecks += 1
            elif count_adjacents_in(board, loc_to_delete, remaining_shape) >= 3:
                num_non_bottlenecks_high_degree += 1

        bonus = 0
        if len(remaining_shape) >= LARGE_DEAD_SHAPE_SIZE:
            bonus += 1

        if initial_piece_count - num_throwins + (num_bottlenecks + num_non_bottlenecks_high_degree + bonus) // 2 < 2:
            return False

    return True
