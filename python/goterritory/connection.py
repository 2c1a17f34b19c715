"""Adapted from goscorer by lightvector (https://github.com/lightvector/goscorer), released under the MIT license."""

import logging
import numpy as np

from goterritory.board import EMPTY, BLACK, WHITE, get_opp, check

# Small shapes where an empty point '@' cuts the opponent off from passing between our stones.
#   p = live stone of the player
#   e = empty, live stone of the player, or dead opponent stone
#   @ = must be empty, the point that gets marked as a block
#   ? = anything
# A final row of 'x' means the shape only matches with that row lying just off the edge of the board.
CONNECTION_BLOCK_PATTERNS = [
    [
        "pp",
        "@e",
        "pe",
    ],
    [
        "ep?",
        "e@e",
        "ep?",
    ],
    [
        "pee",
        "e@p",
        "pee",
    ],
    [
        "?e?",
        "p@p",
        "xxx",
    ],
    [
        "pp",
        "@e",
        "xx",
    ],
    [
        "ep?",
        "e@e",
        "xxx",
    ],
]

# (dy per pattern row, dx per pattern row, dy per pattern col, dx per pattern col)
PATTERN_ORIENTATIONS = [
    (1,0,0,1),
    (-1,0,0,1),
    (1,0,0,-1),
    (-1,0,0,-1),
    (0,1,1,0),
    (0,-1,1,0),
    (0,1,-1,0),
    (0,-1,-1,0),
]

def mark_connection_blocks(board):
    """Returns an int8 grid giving, per loc, the player whose connection shape makes that empty point
    a block against the opponent, or EMPTY. Later matches overwrite earlier ones."""
    ysize = board.ysize
    xsize = board.xsize
    stones = board.stones
    marked_dead = board.marked_dead
    connection_blocks = board.new_grid(EMPTY, np.int8)

    for pla in [BLACK, WHITE]:
        opp = get_opp(pla)

        for (pdydy, pdydx, pdxdy, pdxdx) in PATTERN_ORIENTATIONS:
            for pattern in CONNECTION_BLOCK_PATTERNS:
                pylen = len(pattern)
                pxlen = len(pattern[0])
                is_edge_pattern = 'x' in pattern[pylen-1]

                if is_edge_pattern:
                    pylen -= 1

                y_range = range(ysize)
                x_range = range(xsize)

                #Edge patterns are only tried at the one offset that puts the 'x' row just off the board
                if is_edge_pattern:
                    if pdydy == -1:
                        y_range = [len(pattern)-2]
                    elif pdydy == 1:
                        y_range = [ysize - (len(pattern)-1)]
                    elif pdydx == -1:
                        x_range = [len(pattern)-2]
                    elif pdydx == 1:
                        x_range = [xsize - (len(pattern)-1)]

                for y in y_range:
                    for x in x_range:
                        def get_target_yx(pdy,pdx):
                            return (
                                y + pdydy*pdy + pdxdy*pdx,
                                x + pdydx*pdy + pdxdx*pdx
                            )

                        (ty, tx) = get_target_yx(pylen-1, pxlen-1)
                        if not board.is_on_board(tx,ty):
                            continue

                        at_loc = None
                        mismatch = False
                        for pdy in range(pylen):
                            for pdx in range(pxlen):
                                c = pattern[pdy][pdx]
                                if c == '?':
                                    continue

                                (ty, tx) = get_target_yx(pdy, pdx)
                                if not board.is_on_board(tx,ty):
                                    continue

                                loc = board.loc(tx,ty)
                                if c == 'p':
                                    if not board.is_live(loc,pla):
                                        mismatch = True
                                        break
                                elif c == 'e':
                                    if not (
                                        stones[loc] == EMPTY or
                                        board.is_live(loc,pla) or
                                        (stones[loc] == opp and marked_dead[loc])
                                    ):
                                        mismatch = True
                                        break
                                else:
                                    check(c == '@', f"Invalid pattern char: {c}")
                                    if stones[loc] != EMPTY:
                                        mismatch = True
                                        break
                                    at_loc = loc
                            if mismatch:
                                break

                        if not mismatch:
                            check(at_loc is not None, "Connection block pattern matched without a target point")
                            connection_blocks[at_loc] = pla

    logging.debug(
        "Connection blocks: %d for black, %d for white",
        np.count_nonzero(connection_blocks == BLACK),
        np.count_nonzero(connection_blocks == WHITE),
    )
    return connection_blocks
