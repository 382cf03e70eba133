"""Tournament highlights built from the stored score headers and hole lines."""

from dataclasses import dataclass

from sqlalchemy import select
from sqlalchemy.orm import Session, joinedload, selectinload

from app.core.exceptions import NotFoundError
from app.models.course import Course
from app.models.tournament import Tournament
from app.models.tournament_score import HoleScore, TournamentScore


@dataclass
class HoleHighlight:
    player: str
    hole: int
    strokes: int
    par: int
    over_par: int


@dataclass
class RoundHighlight:
    player: str
    gross_score: int
    course_par: int
    to_par: int


@dataclass
class TournamentStats:
    biggest_blowup_hole: HoleHighlight | None
    lowest_hole_score: HoleHighlight | None
    best_gross_round: RoundHighlight | None
    worst_gross_round: RoundHighlight | None


def _hole_highlight(score: TournamentScore, hs: HoleScore) -> HoleHighlight:
    return HoleHighlight(
        player=score.player.label,
        hole=hs.hole.number,
        strokes=hs.strokes,
        par=hs.hole.par,
        over_par=hs.strokes - hs.hole.par,
    )


def _round_highlight(score: TournamentScore, course_par: int) -> RoundHighlight:
    return RoundHighlight(
        player=score.player.label,
        gross_score=score.gross_score,
        course_par=course_par,
        to_par=score.gross_score - course_par,
    )


def tournament_stats(db: Session, tournament_id: int) -> TournamentStats:
    tournament = db.execute(
        select(Tournament)
        .options(
            joinedload(Tournament.course).selectinload(Course.holes),
            selectinload(Tournament.scores).selectinload(TournamentScore.player),
            selectinload(Tournament.scores)
            .selectinload(TournamentScore.hole_scores)
            .joinedload(HoleScore.hole),
        )
        .where(Tournament.id == tournament_id)
    ).scalars().unique().one_or_none()
    if not tournament:
        raise NotFoundError("Tournament not found")

    course_par = tournament.course.par
    scores = sorted(tournament.scores, key=lambda s: s.id)

    # Earliest entry wins ties everywhere. Only holes over par count as blow-ups.
    blowup = lowest = best = worst = None
    for score in scores:
        if best is None or score.gross_score < best.gross_score:
            best = score
        if worst is None or score.gross_score > worst.gross_score:
            worst = score

        for hs in sorted(score.hole_scores, key=lambda h: h.hole.number):
            over_par = hs.strokes - hs.hole.par
            if over_par > 0 and (blowup is None or over_par > blowup.over_par):
                blowup = _hole_highlight(score, hs)
            if lowest is None or hs.strokes < lowest.strokes:
                lowest = _hole_highlight(score, hs)

    return TournamentStats(
        biggest_blowup_hole=blowup,
        lowest_hole_score=lowest,
        best_gross_round=_round_highlight(best, course_par) if best else None,
        worst_gross_round=_round_highlight(worst, course_par) if worst else None,
    )
