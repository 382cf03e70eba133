"""Per-hole scoring rules.

Pure functions shared by score submission and its tests; nothing here touches
the database.
"""

import math

HOLES_PER_ALLOCATION = 18


def handicap_strokes(playing_handicap: float, stroke_index: int | None) -> int:
    """Extra strokes a player receives on a hole.

    Every hole gets ``handicap // 18`` strokes; holes whose stroke index is
    within ``handicap % 18`` get one more. The fractional part of the handicap
    is ignored and a hole without a stroke index only gets the base strokes.
    """
    full_handicap = math.floor(max(playing_handicap or 0, 0))

    strokes = full_handicap // HOLES_PER_ALLOCATION
    if stroke_index is not None and stroke_index <= full_handicap % HOLES_PER_ALLOCATION:
        strokes += 1

    return strokes


def stableford_points(strokes: int, par: int, handicap_strokes: int) -> int:
    score_to_par = (strokes - handicap_strokes) - par

    if score_to_par <= -3:
        return 5
    if score_to_par == -2:
        return 4
    if score_to_par == -1:
        return 3
    if score_to_par == 0:
        return 2
    if score_to_par == 1:
        return 1
    return 0


def net_score(gross_score: int, handicap: float) -> int:
    # Half-up rounding: 72.5 -> 73.
    return math.floor(gross_score - handicap + 0.5)
