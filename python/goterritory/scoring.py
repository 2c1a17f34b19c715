import logging
from dataclasses import dataclass
from typing import Any, Dict, List, NamedTuple

import numpy as np

from goterritory.board import EMPTY, BLACK, WHITE, BoardPosition
from goterritory.connection import mark_connection_blocks
from goterritory.reach import mark_reachability
from goterritory.regions import mark_regions
from goterritory.chains import mark_chains, mark_macrochains
from goterritory.eyes import mark_potential_eyes, mark_false_eye_points
from goterritory.eyevalue import mark_eye_values

#Only scoringRule and whiteKomi affect scoring here, the other keys name the full rule set
RULES_JAPANESE = {
    "koRule": "KO_SIMPLE",
    "scoringRule": "SCORING_TERRITORY",
    "taxRule": "TAX_SEKI",
    "multiStoneSuicideLegal": False,
    "whiteKomi": 6.5,
}
RULES_CHINESE = {
    "koRule": "KO_SIMPLE",
    "scoringRule": "SCORING_AREA",
    "taxRule": "TAX_NONE",
    "multiStoneSuicideLegal": False,
    "whiteKomi": 7.5,
}
RULES_TT = {
    "koRule": "KO_POSITIONAL",
    "scoringRule": "SCORING_AREA",
    "taxRule": "TAX_NONE",
    "multiStoneSuicideLegal": True,
    "whiteKomi": 7.5,
}


@dataclass
class LocScore:
    """How a single location on the board is scored for territory, along with the reasons why.

    is_territory_for -- EMPTY, BLACK, or WHITE, the player who gets a point of territory here.
    belongs_to_seki_group -- EMPTY, or the player whose region here has too few eyes to count as
        living independently. No territory is scored anywhere in such a region.
    is_false_eye -- the point was judged a false eye before eye values were known. Points like this
        do not count towards eye values.
    is_unscorable_false_eye -- the point was judged a false eye after eye values were known, or it
        touches a dead stone that was, so no territory is scored here unless false eyes are scored.
    is_dame -- the point is in no region.
    eye_value -- the eye value of the eye containing this point, 0 if none.
    """
    is_territory_for: int = EMPTY
    belongs_to_seki_group: int = EMPTY
    is_false_eye: bool = False
    is_unscorable_false_eye: bool = False
    is_dame: bool = False
    eye_value: int = 0


class ScoreResult(NamedTuple):
    black: float
    white: float


@dataclass
class TerritoryAnalysis:
    """Every intermediate result of one territory scoring pass, for debugging and inspection."""
    board: BoardPosition
    connection_blocks: np.ndarray
    strict_reaches_black: np.ndarray
    strict_reaches_white: np.ndarray
    reaches_black: np.ndarray
    reaches_white: np.ndarray
    region_ids: np.ndarray
    region_infos_by_id: Dict[int, Any]
    chain_ids: np.ndarray
    chain_infos_by_id: Dict[int, Any]
    macrochain_ids: np.ndarray
    macrochain_infos_by_id: Dict[int, Any]
    eye_ids: np.ndarray
    eye_infos_by_id: Dict[int, Any]
    is_false_eye_point: np.ndarray
    is_unscorable_false_eye_point: np.ndarray


def analyze_board(board: BoardPosition) -> TerritoryAnalysis:
    connection_blocks = mark_connection_blocks(board)

    (strict_reaches_black, strict_reaches_white) = mark_reachability(board, None)
    (reaches_black, reaches_white) = mark_reachability(board, connection_blocks)

    (region_ids, region_infos_by_id) = mark_regions(board, connection_blocks, reaches_black, reaches_white)

    (chain_ids, chain_infos_by_id) = mark_chains(board, region_ids)

    (macrochain_ids, macrochain_infos_by_id) = mark_macrochains(
        board, connection_blocks, region_ids, chain_ids, chain_infos_by_id
    )

    (eye_ids, eye_infos_by_id) = mark_potential_eyes(
        board, strict_reaches_black, strict_reaches_white,
        region_ids, region_infos_by_id, macrochain_ids, macrochain_infos_by_id,
    )

    is_false_eye_point = mark_false_eye_points(board, region_ids, macrochain_infos_by_id, eye_infos_by_id)

    mark_eye_values(board, chain_ids, chain_infos_by_id, is_false_eye_point, eye_infos_by_id)

    #Same search again, now that eye values are known
    is_unscorable_false_eye_point = mark_false_eye_points(board, region_ids, macrochain_infos_by_id, eye_infos_by_id)

    return TerritoryAnalysis(
        board=board,
        connection_blocks=connection_blocks,
        strict_reaches_black=strict_reaches_black,
        strict_reaches_white=strict_reaches_white,
        reaches_black=reaches_black,
        reaches_white=reaches_white,
        region_ids=region_ids,
        region_infos_by_id=region_infos_by_id,
        chain_ids=chain_ids,
        chain_infos_by_id=chain_infos_by_id,
        macrochain_ids=macrochain_ids,
        macrochain_infos_by_id=macrochain_infos_by_id,
        eye_ids=eye_ids,
        eye_infos_by_id=eye_infos_by_id,
        is_false_eye_point=is_false_eye_point,
        is_unscorable_false_eye_point=is_unscorable_false_eye_point,
    )


def analyze(stones, marked_dead) -> TerritoryAnalysis:
    """Run every territory analysis phase and return the intermediate tables."""
    return analyze_board(BoardPosition.from_grids(stones, marked_dead))


def mark_scoring(analysis: TerritoryAnalysis, score_false_eyes: bool) -> List[LocScore]:
    """Assemble the final per-loc LocScore from a completed analysis."""
    board = analysis.board
    stones = board.stones
    marked_dead = board.marked_dead
    region_ids = analysis.region_ids
    eye_ids = analysis.eye_ids
    is_false_eye_point = analysis.is_false_eye_point
    is_unscorable_false_eye_point = analysis.is_unscorable_false_eye_point

    #Points next to a dead stone sitting in an unscorable false eye are also unscorable for the capturing player
    extra_black_unscorable_points = set()
    extra_white_unscorable_points = set()
    for loc in range(board.arrsize):
        if is_unscorable_false_eye_point[loc] and stones[loc] != EMPTY and marked_dead[loc]:
            if stones[loc] == WHITE:
                extra_black_unscorable_points.update(board.adj[loc])
            else:
                extra_white_unscorable_points.update(board.adj[loc])

    total_eyes_by_region = {}
    for region_id, region_info in analysis.region_infos_by_id.items():
        total_eyes_by_region[region_id] = sum(analysis.eye_infos_by_id[eye_id].eye_value for eye_id in region_info.eyes)

    scoring = []
    for loc in range(board.arrsize):
        s = LocScore()
        scoring.append(s)
        region_id = int(region_ids[loc])

        if region_id == -1:
            s.is_dame = True
            continue

        color = analysis.region_infos_by_id[region_id].color
        if total_eyes_by_region[region_id] <= 1:
            s.belongs_to_seki_group = color
        if is_false_eye_point[loc]:
            s.is_false_eye = True
        if is_unscorable_false_eye_point[loc]:
            s.is_unscorable_false_eye = True
        if (stones[loc] == EMPTY or marked_dead[loc]) and (
            (color == BLACK and loc in extra_black_unscorable_points) or
            (color == WHITE and loc in extra_white_unscorable_points)
        ):
            s.is_unscorable_false_eye = True

        s.eye_value = analysis.eye_infos_by_id[int(eye_ids[loc])].eye_value if eye_ids[loc] != -1 else 0

        if (
            (stones[loc] != color or marked_dead[loc]) and
            s.belongs_to_seki_group == EMPTY and
            (score_false_eyes or not s.is_unscorable_false_eye) and
            analysis.chain_infos_by_id[int(analysis.chain_ids[loc])].region_id == region_id and
            not (color == WHITE and analysis.strict_reaches_black[loc]) and
            not (color == BLACK and analysis.strict_reaches_white[loc])
        ):
            s.is_territory_for = color

    return scoring


def territory_scoring(stones, marked_dead, score_false_eyes: bool = False) -> List[List[LocScore]]:
    """Classify every point of the board for territory scoring.

    stones -- [y][x] grid of EMPTY / BLACK / WHITE
    marked_dead -- [y][x] grid of bools, True where a stone has been marked dead
    score_false_eyes -- if True, score territory in false eyes even when is_unscorable_false_eye is set

    Returns a [y][x] grid of LocScore.
    """
    board = BoardPosition.from_grids(stones, marked_dead)
    return scoring_rows(board, mark_scoring(analyze_board(board), score_false_eyes))


def scoring_rows(board: BoardPosition, scoring: List[LocScore]) -> List[List[LocScore]]:
    """Split a flat per-loc list of LocScore into [y][x] rows."""
    return [scoring[y*board.xsize:(y+1)*board.xsize] for y in range(board.ysize)]


def area_scoring(stones, marked_dead) -> List[List[int]]:
    """Returns a [y][x] grid of EMPTY / BLACK / WHITE giving the owner of each point under area scoring:
    whichever player alone can strictly reach it."""
    board = BoardPosition.from_grids(stones, marked_dead)
    (strict_reaches_black, strict_reaches_white) = mark_reachability(board, None)
    return board.to_grid(area_owners(board, strict_reaches_black, strict_reaches_white))


def area_owners(board: BoardPosition, strict_reaches_black, strict_reaches_white) -> np.ndarray:
    """Flat int8 grid of the player who alone strictly reaches each loc, or EMPTY."""
    owners = board.new_grid(EMPTY, np.int8)
    owners[strict_reaches_white & ~strict_reaches_black] = WHITE
    owners[strict_reaches_black & ~strict_reaches_white] = BLACK
    return owners


def count_territory_score(
    board: BoardPosition,
    scoring: List[LocScore],
    black_points_from_captures: float,
    white_points_from_captures: float,
    komi: float,
) -> ScoreResult:
    """Territory score from a flat per-loc LocScore list: territory, plus opposing stones marked dead,
    plus captures. Komi is added to white."""
    stones = board.stones
    marked_dead = board.marked_dead

    final_black_score = 0
    final_white_score = 0
    for loc in range(board.arrsize):
        if scoring[loc].is_territory_for == BLACK:
            final_black_score += 1
        elif scoring[loc].is_territory_for == WHITE:
            final_white_score += 1

        if stones[loc] == BLACK and marked_dead[loc]:
            final_white_score += 1
        elif stones[loc] == WHITE and marked_dead[loc]:
            final_black_score += 1

    final_black_score += black_points_from_captures
    final_white_score += white_points_from_captures
    final_white_score += komi
    logging.debug("Territory score: black %s, white %s", final_black_score, final_white_score)
    return ScoreResult(black=final_black_score, white=final_white_score)


def count_area_score(owners: np.ndarray, komi: float) -> ScoreResult:
    final_black_score = int(np.count_nonzero(owners == BLACK))
    final_white_score = int(np.count_nonzero(owners == WHITE)) + komi
    logging.debug("Area score: black %s, white %s", final_black_score, final_white_score)
    return ScoreResult(black=final_black_score, white=final_white_score)


def final_territory_score(
    stones,
    marked_dead,
    black_points_from_captures: float,
    white_points_from_captures: float,
    komi: float,
    score_false_eyes: bool = False,
) -> ScoreResult:
    """Territory score for each player: territory, plus opposing stones marked dead, plus captures.
    Komi is added to white."""
    board = BoardPosition.from_grids(stones, marked_dead)
    scoring = mark_scoring(analyze_board(board), score_false_eyes)
    return count_territory_score(board, scoring, black_points_from_captures, white_points_from_captures, komi)


def final_area_score(stones, marked_dead, komi: float) -> ScoreResult:
    """Area score for each player: every point only that player strictly reaches. Komi is added to white."""
    board = BoardPosition.from_grids(stones, marked_dead)
    (strict_reaches_black, strict_reaches_white) = mark_reachability(board, None)
    return count_area_score(area_owners(board, strict_reaches_black, strict_reaches_white), komi)


def final_score(
    stones,
    marked_dead,
    rules: Dict[str, Any],
    black_captures: float = 0,
    white_captures: float = 0,
    score_false_eyes: bool = False,
) -> ScoreResult:
    """Score under a rules dict such as RULES_JAPANESE or RULES_CHINESE, using its scoringRule and whiteKomi.
    Captures only count under territory scoring."""
    scoring_rule = rules["scoringRule"]
    komi = rules["whiteKomi"]
    if scoring_rule == "SCORING_TERRITORY":
        return final_territory_score(stones, marked_dead, black_captures, white_captures, komi, score_false_eyes)
    elif scoring_rule == "SCORING_AREA":
        return final_area_score(stones, marked_dead, komi)
    else:
        raise ValueError("Unknown scoring rule: " + str(scoring_rule))
