from goterritory.board import BLACK, WHITE, get_opp

def mark_reachability(board, connection_blocks=None):
    """Flood fill from every live stone of each player through empty points and dead opponent stones.

    Without connection_blocks this is strict reachability. With them, a point that is a block against a
    player is still reached by that player, but the flood does not continue out of it.

    Returns (reaches_black, reaches_white) as bool grids.
    """
    reaches_black = board.new_grid(False, bool)
    reaches_white = board.new_grid(False, bool)

    def fill_reach(start, reaches_pla, pla):
        opp = get_opp(pla)
        stack = [start]
        while stack:
            loc = stack.pop()
            if reaches_pla[loc]:
                continue
            if board.is_live(loc,opp):
                continue

            reaches_pla[loc] = True

            if connection_blocks is not None and connection_blocks[loc] == opp:
                continue

            stack.extend(board.adj[loc])

    for loc in range(board.arrsize):
        if board.is_live(loc,BLACK):
            fill_reach(loc, reaches_black, BLACK)
        if board.is_live(loc,WHITE):
            fill_reach(loc, reaches_white, WHITE)

    return (reaches_black, reaches_white)
