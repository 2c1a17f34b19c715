#!/usr/bin/python3
import argparse
import logging
import sys

from goterritory.board import BoardInputError
from goterritory.diagram import parse_diagram, render_scoring, string2d, color_to_str
from goterritory.scoring import (
    RULES_JAPANESE,
    RULES_CHINESE,
    RULES_TT,
    analyze,
    area_owners,
    count_area_score,
    count_territory_score,
    mark_scoring,
    scoring_rows,
)

description = """
Score a finished go position given as a text diagram, with dead stones already marked.
Diagram rows are '.' empty, 'x' black, 'o' white, 'X' dead black, 'O' dead white.
"""

RULES_BY_NAME = {
    "japanese": RULES_JAPANESE,
    "chinese": RULES_CHINESE,
    "tt": RULES_TT,
}

def make_parser():
    parser = argparse.ArgumentParser(description=description)
    parser.add_argument("-board", help="Diagram file to score, or - for stdin", required=True)
    parser.add_argument("-rules", help="Rules to score under, default japanese", choices=sorted(RULES_BY_NAME), default="japanese", required=False)
    parser.add_argument("-komi", help="Komi for white, default from rules", type=float, required=False)
    parser.add_argument("-black-captures", help="Stones captured by black during the game", type=int, default=0, required=False)
    parser.add_argument("-white-captures", help="Stones captured by white during the game", type=int, default=0, required=False)
    parser.add_argument("-score-false-eyes", help="Count territory in false eyes", action="store_true", required=False)
    parser.add_argument("-show-analysis", help="Also log regions, eyes and eye values", action="store_true", required=False)
    return parser


def read_diagram(path):
    if path == "-":
        return sys.stdin.read()
    with open(path) as f:
        return f.read()


def log_analysis(analysis):
    board = analysis.board
    logging.info("Region ids:\n" + string2d(board.to_grid(analysis.region_ids), lambda r: "%3d" % r))
    for region_info in analysis.region_infos_by_id.values():
        logging.info(str(region_info))
    for eye_info in analysis.eye_infos_by_id.values():
        logging.info(str(eye_info))
    logging.info("False eye points:\n" + string2d(board.to_grid(analysis.is_false_eye_point), lambda b: "F " if b else ". "))
    logging.info("Unscorable false eye points:\n" + string2d(board.to_grid(analysis.is_unscorable_false_eye_point), lambda b: "F " if b else ". "))


def main(argv):
    args = vars(make_parser().parse_args(argv))
    board_file = args["board"]
    rules = dict(RULES_BY_NAME[args["rules"]])
    if args["komi"] is not None:
        rules["whiteKomi"] = args["komi"]

    logging.root.handlers = []
    logging.basicConfig(
        level=logging.INFO,
        format="%(message)s",
        handlers=[
            logging.StreamHandler(stream=sys.stdout),
        ],
    )

    logging.info(str(sys.argv))

    try:
        (stones, marked_dead) = parse_diagram(read_diagram(board_file))
        analysis = analyze(stones, marked_dead)
        board = analysis.board
        komi = rules["whiteKomi"]

        if rules["scoringRule"] == "SCORING_TERRITORY":
            scoring = mark_scoring(analysis, args["score_false_eyes"])
            logging.info("Territory:\n" + render_scoring(scoring_rows(board, scoring)))
            score = count_territory_score(board, scoring, args["black_captures"], args["white_captures"], komi)
        else:
            owners = area_owners(board, analysis.strict_reaches_black, analysis.strict_reaches_white)
            logging.info("Area:\n" + string2d(board.to_grid(owners), lambda c: color_to_str(c) + " "))
            score = count_area_score(owners, komi)

        if args["show_analysis"]:
            log_analysis(analysis)
    except OSError as e:
        logging.error("Could not read board: " + str(e))
        return 1
    except BoardInputError as e:
        logging.error("Could not score board: " + str(e))
        return 1

    if score.black > score.white:
        result = "B+" + str(score.black - score.white)
    elif score.white > score.black:
        result = "W+" + str(score.white - score.black)
    else:
        result = "Draw"
    print(f"Black {score.black} White {score.white} {result}")
    return 0


if __name__ == "__main__":
    sys.exit(main(sys.argv[1:]))
