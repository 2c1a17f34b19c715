"""Text diagrams of positions and scoring results."""

from typing import Callable, List, Tuple

from goterritory.board import EMPTY, BLACK, WHITE, BoardInputError

_diagram_points = {
    ".": (EMPTY, False),
    "x": (BLACK, False),
    "o": (WHITE, False),
    "X": (BLACK, True),
    "O": (WHITE, True),
}


def parse_diagram(diagram: str) -> Tuple[List[List[int]], List[List[bool]]]:
    """Set up a position from a diagram.

    diagram -- one line per row, top row first. '.' is empty, 'x' black, 'o' white, and
    'X' / 'O' are black / white stones marked dead. Whitespace is ignored and blank lines skipped.

    Returns (stones, marked_dead) as [y][x] lists.

    Raises BoardInputError for an empty or ragged diagram or an unknown character.
    """
    stones = []
    marked_dead = []
    for line in diagram.split("\n"):
        cells = "".join(line.split())
        if len(cells) == 0:
            continue
        stones_row = []
        dead_row = []
        for c in cells:
            if c not in _diagram_points:
                raise BoardInputError("Unexpected character in diagram: " + repr(c))
            (color, is_dead) = _diagram_points[c]
            stones_row.append(color)
            dead_row.append(is_dead)
        if len(stones) > 0 and len(stones_row) != len(stones[0]):
            raise BoardInputError(f"Diagram row {len(stones)} has length {len(stones_row)}, expected {len(stones[0])}")
        stones.append(stones_row)
        marked_dead.append(dead_row)

    if len(stones) == 0:
        raise BoardInputError("Diagram has no rows")
    return (stones, marked_dead)


def color_to_str(color: int) -> str:
    if color == EMPTY:
        return "."
    if color == BLACK:
        return "x"
    if color == WHITE:
        return "o"
    raise ValueError("Invalid color: " + str(color))


def string2d(grid, f: Callable) -> str:
    """Render a [y][x] grid, one line per row, formatting each item with f."""
    return "\n".join("".join(f(item) for item in row) for row in grid)


def string2d2(grid1, grid2, f: Callable) -> str:
    """Like string2d, but f is passed the items of two same-shaped grids at each point."""
    lines = []
    for (row1, row2) in zip(grid1, grid2):
        lines.append("".join(f(item1, item2) for (item1, item2) in zip(row1, row2)))
    return "\n".join(lines)


def render_scoring(scoring) -> str:
    """Render a [y][x] grid of LocScore.

    Territory shows as 'x' or 'o'. Otherwise a point in a seki region shows as 's', an unscorable
    false eye as 'f', a point in no region as '-', and anything else as '.'.
    """
    def format_pt(s):
        if s.is_territory_for != EMPTY:
            return color_to_str(s.is_territory_for) + " "
        if s.belongs_to_seki_group != EMPTY:
            return "s "
        if s.is_unscorable_false_eye:
            return "f "
        if s.is_dame:
            return "- "
        return ". "

    return "\n".join(line.rstrip() for line in string2d(scoring, format_pt).split("\n"))
