import logging
import numpy as np

from goterritory.board import BLACK, WHITE

class RegionInfo:
    def __init__(self, region_id, color, region_and_dame, eyes):
        self.region_id = region_id
        self.color = color
        #Every loc the region's flood passed through, including ones that ended up in no region
        self.region_and_dame = region_and_dame
        #Ids of potential eyes inside the region, filled in by mark_potential_eyes
        self.eyes = eyes

    def __repr__(self):
        return f"RegionInfo(region_id={self.region_id}, color={self.color}, size={len(self.region_and_dame)}, eyes={sorted(self.eyes)})"


def mark_regions(board, connection_blocks, reaches_black, reaches_white):
    """Partition the board into maximal areas reachable (with connection blocks) by exactly one player.

    Returns (region_ids, region_infos_by_id), where region_ids is an int grid with -1 for points in no region.
    """
    region_ids = board.new_grid(-1, np.int32)
    region_infos_by_id = {}

    def fill_region(start, with_id, opp, reaches_pla, reaches_opp):
        visited = board.new_grid(False, bool)
        region_and_dame = region_infos_by_id[with_id].region_and_dame
        stack = [start]
        while stack:
            loc = stack.pop()
            if visited[loc]:
                continue
            if region_ids[loc] != -1:
                continue
            if board.is_live(loc,opp):
                continue

            visited[loc] = True
            region_and_dame.add(loc)

            if reaches_pla[loc] and not reaches_opp[loc]:
                region_ids[loc] = with_id

            if connection_blocks[loc] == opp:
                continue

            stack.extend(board.adj[loc])

    next_region_id = 0
    for loc in range(board.arrsize):
        if reaches_black[loc] and not reaches_white[loc] and region_ids[loc] == -1:
            region_id = next_region_id
            next_region_id += 1
            region_infos_by_id[region_id] = RegionInfo(region_id, BLACK, set(), set())
            fill_region(loc, region_id, WHITE, reaches_black, reaches_white)
        if reaches_white[loc] and not reaches_black[loc] and region_ids[loc] == -1:
            region_id = next_region_id
            next_region_id += 1
            region_infos_by_id[region_id] = RegionInfo(region_id, WHITE, set(), set())
            fill_region(loc, region_id, BLACK, reaches_white, reaches_black)

    logging.debug("Regions: %d", len(region_infos_by_id))
    return (region_ids, region_infos_by_id)
