"""Adapted from goscorer by lightvector (https://github.com/lightvector/goscorer), released under the MIT license."""

import logging
import numpy as np

from goterritory.board import EMPTY, check

class EyeInfo:
    def __init__(self, pla, region_id, eye_id, potential_points, real_points, macrochain_neighbors_from, is_loose, eye_value):
        self.pla = pla
        self.region_id = region_id
        self.eye_id = eye_id
        #All empty or dead points of the eye
        self.potential_points = potential_points
        #potential_points minus the false eye points, filled in by mark_eye_values
        self.real_points = real_points
        #macrochain id -> set of eye locs from which that macrochain is touched
        self.macrochain_neighbors_from = macrochain_neighbors_from
        #Both players strictly reach the eye. Informational only, nothing downstream reads it.
        self.is_loose = is_loose
        #0, 1, or 2, filled in by mark_eye_values
        self.eye_value = eye_value

    def __repr__(self):
        return f"EyeInfo(eye_id={self.eye_id}, pla={self.pla}, region_id={self.region_id}, size={len(self.potential_points)}, eye_value={self.eye_value})"


def mark_potential_eyes(
    board,
    strict_reaches_black,
    strict_reaches_white,
    region_ids,
    region_infos_by_id, # mutated, eye ids are added to each region
    macrochain_ids,
    macrochain_infos_by_id, # mutated, eye_neighbors_from is filled in
):
    """Find each maximal connected set of empty or dead points within a region, recording along the way
    which macrochains the set touches and from where.

    Returns (eye_ids, eye_infos_by_id).
    """
    stones = board.stones
    marked_dead = board.marked_dead
    eye_ids = board.new_grid(-1, np.int32)
    eye_infos_by_id = {}
    visited = board.new_grid(False, bool)
    next_eye_id = 0

    for seed in range(board.arrsize):
        if visited[seed]:
            continue
        if eye_ids[seed] != -1:
            continue
        if stones[seed] != EMPTY and not marked_dead[seed]:
            continue

        region_id = int(region_ids[seed])
        if region_id == -1:
            continue

        region_info = region_infos_by_id[region_id]
        pla = region_info.color
        is_loose = bool(strict_reaches_white[seed] and strict_reaches_black[seed])
        eye_id = next_eye_id
        next_eye_id += 1
        potential_points = set()
        macrochain_neighbors_from = {}

        check(macrochain_ids[seed] == -1, f"Potential eye seed ({board.loc_x(seed)},{board.loc_y(seed)}) lies in a macrochain")

        #Entries are (loc, the eye loc we came from)
        stack = [(seed, None)]
        while stack:
            (loc, prev_loc) = stack.pop()
            if visited[loc]:
                continue
            if region_ids[loc] != region_id:
                continue

            if macrochain_ids[loc] != -1:
                macrochain_id = int(macrochain_ids[loc])
                macrochain_neighbors_from.setdefault(macrochain_id, set()).add(prev_loc)
                macrochain_infos_by_id[macrochain_id].eye_neighbors_from.setdefault(eye_id, set()).add(loc)

            if stones[loc] != EMPTY and not marked_dead[loc]:
                continue

            visited[loc] = True
            eye_ids[loc] = eye_id
            potential_points.add(loc)

            for adj in board.adj[loc]:
                stack.append((adj, loc))

        eye_infos_by_id[eye_id] = EyeInfo(
            pla,
            region_id,
            eye_id,
            potential_points,
            set(),
            macrochain_neighbors_from,
            is_loose,
            0,
        )
        region_info.eyes.add(eye_id)

    logging.debug("Potential eyes: %d", len(eye_infos_by_id))
    return (eye_ids, eye_infos_by_id)


def find_recursively_adjacent_points(board, within_set, from_points, excluding_points):
    """All points of within_set connected to from_points through within_set, avoiding excluding_points."""
    expanded = set()
    queue = list(from_points)
    i = 0
    while i < len(queue):
        loc = queue[i]
        i += 1
        if loc in excluding_points or loc in expanded or loc not in within_set:
            continue
        expanded.add(loc)
        queue.extend(board.adj[loc])
    return expanded


def mark_false_eye_points(
    board,
    region_ids,
    macrochain_infos_by_id,
    eye_infos_by_id,
):
    """Mark eye points that only look secure.

    For each eye point touching a macrochain that has at most one neighbor in the same eye, search outward
    through the macrochains and eyes connected to it. The point is real if that search can come back around
    to it from as many independent sides as it has sides in the region, or if it connects to a real point of
    an eye already known to be worth something. Otherwise it is false.

    Eye values are read from eye_infos_by_id, so running this again after mark_eye_values gives a stricter
    result than running it before.

    Returns a bool grid.
    """
    is_false_eye_point = board.new_grid(False, bool)

    for orig_eye_id, orig_eye_info in eye_infos_by_id.items():
        for orig_macrochain_id in sorted(orig_eye_info.macrochain_neighbors_from):
            neighbors_from_eye_points = orig_eye_info.macrochain_neighbors_from[orig_macrochain_id]

            for eloc in neighbors_from_eye_points:
                same_eye_adj_count = 0
                for adj in board.adj[eloc]:
                    if adj in orig_eye_info.potential_points:
                        same_eye_adj_count += 1
                if same_eye_adj_count > 1:
                    continue

                target_side_count = 0
                for adj in board.adj[eloc]:
                    if region_ids[adj] == orig_eye_info.region_id:
                        target_side_count += 1

                if not _search_reaches_back(
                    board,
                    macrochain_infos_by_id,
                    eye_infos_by_id,
                    orig_eye_id,
                    orig_macrochain_id,
                    eloc,
                    target_side_count,
                ):
                    is_false_eye_point[eloc] = True

    logging.debug("False eye points: %d", np.count_nonzero(is_false_eye_point))
    return is_false_eye_point


def _search_reaches_back(
    board,
    macrochain_infos_by_id,
    eye_infos_by_id,
    orig_eye_id,
    orig_macrochain_id,
    eloc,
    target_side_count,
):
    reaching_sides = set()
    visited_macro = set()
    visited_other_eyes = set()
    visited_orig_eye_points = {eloc}

    #Searching one macrochain. Yields the ids of further macrochains to search depth first, and returns
    #True as soon as the point is shown to be real.
    def search(macrochain_id):
        macrochain_info = macrochain_infos_by_id[macrochain_id]
        for eye_id in sorted(macrochain_info.eye_neighbors_from):
            if eye_id in visited_other_eyes:
                continue

            eye_info = eye_infos_by_id[eye_id]
            if eye_id == orig_eye_id:
                for loc in macrochain_info.eye_neighbors_from[eye_id]:
                    if board.is_adjacent(loc, eloc):
                        reaching_sides.add(loc)
                        if len(reaching_sides) >= target_side_count:
                            return True

                check(
                    macrochain_id in eye_info.macrochain_neighbors_from,
                    f"Eye {eye_id} is missing its link back to macrochain {macrochain_id}"
                )
                points_reached = find_recursively_adjacent_points(
                    board,
                    eye_info.potential_points,
                    eye_info.macrochain_neighbors_from[macrochain_id],
                    visited_orig_eye_points,
                )
                if len(points_reached) == 0:
                    continue

                visited_orig_eye_points.update(points_reached)

                if eye_info.eye_value > 0:
                    for loc in points_reached:
                        if loc in eye_info.real_points:
                            return True

                for loc in points_reached:
                    if board.is_adjacent(loc, eloc):
                        reaching_sides.add(loc)
                        if len(reaching_sides) >= target_side_count:
                            return True

                for next_macrochain_id in sorted(eye_info.macrochain_neighbors_from):
                    if not eye_info.macrochain_neighbors_from[next_macrochain_id].isdisjoint(points_reached):
                        yield next_macrochain_id

            else:
                visited_other_eyes.add(eye_id)
                if eye_info.eye_value > 0:
                    return True

                for next_macrochain_id in sorted(eye_info.macrochain_neighbors_from):
                    yield next_macrochain_id

        return False

    #Explicit stack of in-progress searches in place of recursion
    visited_macro.add(orig_macrochain_id)
    stack = [search(orig_macrochain_id)]
    while stack:
        try:
            next_macrochain_id = next(stack[-1])
        except StopIteration as e:
            stack.pop()
            if e.value:
                return True
            continue

        if next_macrochain_id in visited_macro:
            continue
        visited_macro.add(next_macrochain_id)
        stack.append(search(next_macrochain_id))

    return False
