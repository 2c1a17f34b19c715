import logging
import numpy as np

from goterritory.board import EMPTY, BLACK, WHITE, get_opp, check

class ChainInfo:
    def __init__(self, chain_id, region_id, color, points, neighbors, adjacents, liberties, is_marked_dead):
        self.chain_id = chain_id
        #-1 if the chain's points do not all lie in the same region
        self.region_id = region_id
        self.color = color
        self.points = points
        #Ids of the other chains touching this one
        self.neighbors = neighbors
        #Locs orthogonally adjacent to but not part of the chain
        self.adjacents = adjacents
        #The empty subset of adjacents
        self.liberties = liberties
        self.is_marked_dead = is_marked_dead

    def __repr__(self):
        return f"ChainInfo(chain_id={self.chain_id}, region_id={self.region_id}, color={self.color}, dead={self.is_marked_dead}, points={self.points})"


class MacrochainInfo:
    def __init__(self, macrochain_id, region_id, color, points, chains, eye_neighbors_from):
        self.macrochain_id = macrochain_id
        self.region_id = region_id
        self.color = color
        self.points = points
        self.chains = chains
        #eye id -> set of macrochain locs that the eye touches, filled in by mark_potential_eyes
        self.eye_neighbors_from = eye_neighbors_from

    def __repr__(self):
        return f"MacrochainInfo(macrochain_id={self.macrochain_id}, region_id={self.region_id}, color={self.color}, chains={sorted(self.chains)})"


def mark_chains(board, region_ids):
    """Split the whole board, empty points included, into maximal orthogonally connected runs
    of the same color and dead-marking.

    Returns (chain_ids, chain_infos_by_id).
    """
    stones = board.stones
    marked_dead = board.marked_dead
    chain_ids = board.new_grid(-1, np.int32)
    chain_infos_by_id = {}

    def fill_chain(start, with_id, color, is_marked_dead):
        chain_info = chain_infos_by_id[with_id]
        stack = [start]
        while stack:
            loc = stack.pop()
            if chain_ids[loc] == with_id:
                continue

            if chain_ids[loc] != -1:
                other_id = int(chain_ids[loc])
                chain_infos_by_id[other_id].neighbors.add(with_id)
                chain_info.neighbors.add(other_id)
                chain_info.adjacents.add(loc)
                if stones[loc] == EMPTY:
                    chain_info.liberties.add(loc)
                continue
            if stones[loc] != color or marked_dead[loc] != is_marked_dead:
                chain_info.adjacents.add(loc)
                if stones[loc] == EMPTY:
                    chain_info.liberties.add(loc)
                continue

            chain_ids[loc] = with_id
            chain_info.points.append(loc)
            if chain_info.region_id != region_ids[loc]:
                chain_info.region_id = -1

            check(
                color == EMPTY or region_ids[loc] == chain_info.region_id,
                f"Stone chain {with_id} spans more than one region at ({board.loc_x(loc)},{board.loc_y(loc)})"
            )

            stack.extend(board.adj[loc])

    next_chain_id = 0
    for loc in range(board.arrsize):
        if chain_ids[loc] == -1:
            chain_id = next_chain_id
            next_chain_id += 1
            color = int(stones[loc])
            is_marked_dead = bool(marked_dead[loc])

            chain_infos_by_id[chain_id] = ChainInfo(
                chain_id,
                int(region_ids[loc]),
                color,
                [],
                set(),
                set(),
                set(),
                is_marked_dead,
            )

            check(
                is_marked_dead or color == EMPTY or region_ids[loc] != -1,
                f"Live stone at ({board.loc_x(loc)},{board.loc_y(loc)}) is not in any region"
            )
            fill_chain(loc, chain_id, color, is_marked_dead)

    logging.debug("Chains: %d", len(chain_infos_by_id))
    return (chain_ids, chain_infos_by_id)


def mark_macrochains(board, connection_blocks, region_ids, chain_ids, chain_infos_by_id):
    """Group each player's live chains into macrochains: chains that connect through each other
    or through points in no region that are not blocked against that player.

    Returns (macrochain_ids, macrochain_infos_by_id).
    """
    macrochain_ids = board.new_grid(-1, np.int32)
    macrochain_infos_by_id = {}
    next_macrochain_id = 0

    for pla in [BLACK, WHITE]:
        opp = get_opp(pla)
        chains_handled = set()
        visited = board.new_grid(False, bool)

        for chain_id, chain_info in chain_infos_by_id.items():
            if chain_id in chains_handled:
                continue
            if not (chain_info.color == pla and not chain_info.is_marked_dead):
                continue

            region_id = chain_info.region_id
            check(region_id != -1, f"Live chain {chain_id} has no region")

            macrochain_id = next_macrochain_id
            next_macrochain_id += 1
            points = []
            chains = set()

            stack = [chain_info.points[0]]
            while stack:
                loc = stack.pop()
                if visited[loc]:
                    continue
                visited[loc] = True

                if board.is_live(loc,pla):
                    macrochain_ids[loc] = macrochain_id
                    points.append(loc)
                    chain_id2 = int(chain_ids[loc])
                    if chain_id2 not in chains:
                        chains.add(chain_id2)
                        chains_handled.add(chain_id2)
                    stack.extend(board.adj[loc])
                elif region_ids[loc] == -1 and connection_blocks[loc] != opp:
                    stack.extend(board.adj[loc])

            macrochain_infos_by_id[macrochain_id] = MacrochainInfo(
                macrochain_id,
                region_id,
                pla,
                points,
                chains,
                {},
            )

    logging.debug("Macrochains: %d", len(macrochain_infos_by_id))
    return (macrochain_ids, macrochain_infos_by_id)
