from dataclasses import dataclass

import structlog
from sqlalchemy import delete, select
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.orm import Session, joinedload

from app.core.exceptions import ConflictError, NotFoundError, ValidationError
from app.models.course import Course, Hole
from app.models.player import Player
from app.models.tournament import Tournament
from app.models.tournament_participant import TournamentParticipant
from app.models.tournament_score import HoleScore, TournamentScore
from app.services.scoring import handicap_strokes, net_score, stableford_points

logger = structlog.get_logger(__name__)

MIN_STROKES = 1
MAX_STROKES = 15


@dataclass
class HoleScoreEntry:
    hole_id: int
    strokes: int
    putts: int | None = None
    fairway_hit: bool | None = None
    green_in_regulation: bool | None = None


def _get_player(db: Session, player_id: int) -> Player:
    player = db.get(Player, player_id)
    if not player:
        raise NotFoundError("User not found")
    return player


def _get_tournament(db: Session, tournament_id: int) -> Tournament:
    tournament = db.execute(
        select(Tournament)
        .options(joinedload(Tournament.course).joinedload(Course.holes))
        .where(Tournament.id == tournament_id)
    ).scalars().unique().one_or_none()
    if not tournament:
        raise NotFoundError("Tournament not found")
    return tournament


def _validate_hole_scores(entries: list[HoleScoreEntry], holes_by_id: dict[int, Hole]) -> None:
    if len(entries) != len(holes_by_id):
        raise ValidationError(
            f"Invalid hole count. Expected {len(holes_by_id)} holes, received {len(entries)}"
        )

    seen: set[int] = set()
    for entry in entries:
        if entry.hole_id not in holes_by_id:
            raise ValidationError(f"Invalid hole ID: {entry.hole_id}")
        if entry.hole_id in seen:
            raise ValidationError(f"Duplicate hole ID: {entry.hole_id}")
        seen.add(entry.hole_id)

        strokes = entry.strokes
        if isinstance(strokes, bool) or not isinstance(strokes, int) or not (
            MIN_STROKES <= strokes <= MAX_STROKES
        ):
            raise ValidationError(
                f"Invalid strokes for hole {entry.hole_id}: must be between {MIN_STROKES} and {MAX_STROKES}"
            )


def _ensure_participant(db: Session, tournament_id: int, player_id: int) -> TournamentParticipant:
    participant = db.execute(
        select(TournamentParticipant).where(
            TournamentParticipant.tournament_id == tournament_id,
            TournamentParticipant.player_id == player_id,
        )
    ).scalars().one_or_none()
    if participant:
        return participant

    participant = TournamentParticipant(
        tournament_id=tournament_id, player_id=player_id, role="player", status="registered"
    )
    db.add(participant)
    db.flush()
    return participant


def submit_score(
    db: Session,
    tournament_id: int,
    player_id: int,
    gross_score: int | None = None,
    hole_scores: list[HoleScoreEntry] | None = None,
) -> tuple[TournamentScore, bool]:
    """Create or replace a player's score for a tournament.

    The header and its hole lines are committed together or not at all.
    Returns the score and whether a new header was created.
    """
    player = _get_player(db, player_id)
    tournament = _get_tournament(db, tournament_id)

    if tournament.is_completed:
        raise ConflictError("Tournament already completed")

    holes_by_id = {h.id: h for h in tournament.course.holes}

    try:
        if hole_scores is not None:
            _validate_hole_scores(hole_scores, holes_by_id)
            final_gross = sum(e.strokes for e in hole_scores)
        elif gross_score is not None:
            final_gross = gross_score
        else:
            raise ValidationError("Either gross_score or hole_scores must be provided")
    except ValidationError as exc:
        logger.warning(
            "Rejected score submission",
            tournament_id=tournament_id,
            player_id=player_id,
            reason=exc.detail,
        )
        raise

    # Snapshot; everything below uses this value, never the live field.
    handicap = float(player.current_handicap or 0)
    net = net_score(final_gross, handicap)

    points_by_hole: dict[int, int] | None = None
    if tournament.is_stableford and hole_scores is not None:
        points_by_hole = {}
        for entry in hole_scores:
            hole = holes_by_id[entry.hole_id]
            points_by_hole[entry.hole_id] = stableford_points(
                entry.strokes, hole.par, handicap_strokes(handicap, hole.stroke_index)
            )
    total_points = sum(points_by_hole.values()) if points_by_hole is not None else None

    try:
        score = db.execute(
            select(TournamentScore)
            .where(
                TournamentScore.tournament_id == tournament.id,
                TournamentScore.player_id == player.id,
            )
            .with_for_update()
        ).scalars().one_or_none()
        created = score is None

        if score:
            score.gross_score = final_gross
            score.handicap_at_time = handicap
            score.net_score = net
            score.stableford_points = total_points
            if hole_scores is not None:
                db.execute(delete(HoleScore).where(HoleScore.tournament_score_id == score.id))
        else:
            participant = _ensure_participant(db, tournament.id, player.id)
            score = TournamentScore(
                tournament_id=tournament.id,
                participant_id=participant.id,
                player_id=player.id,
                gross_score=final_gross,
                handicap_at_time=handicap,
                net_score=net,
                stableford_points=total_points,
            )
            db.add(score)
        db.flush()

        if hole_scores is not None:
            db.add_all(
                [
                    HoleScore(
                        tournament_score_id=score.id,
                        hole_id=e.hole_id,
                        strokes=e.strokes,
                        stableford_points=(
                            points_by_hole[e.hole_id] if points_by_hole is not None else None
                        ),
                        putts=e.putts,
                        fairway_hit=e.fairway_hit,
                        green_in_regulation=e.green_in_regulation,
                    )
                    for e in hole_scores
                ]
            )

        db.commit()
    except IntegrityError:
        db.rollback()
        raise ConflictError("Score was submitted concurrently, please retry")
    except SQLAlchemyError:
        db.rollback()
        raise

    logger.info(
        "Score submitted",
        tournament_id=tournament.id,
        player_id=player.id,
        created=created,
        gross=final_gross,
        net=net,
        stableford=total_points,
    )
    return score, created


def leaderboard(db: Session, tournament_id: int) -> list[TournamentScore]:
    tournament = db.get(Tournament, tournament_id)
    if not tournament:
        raise NotFoundError("Tournament not found")

    if tournament.is_stableford:
        order = (TournamentScore.stableford_points.desc().nulls_last(), TournamentScore.id.asc())
    else:
        order = (TournamentScore.net_score.asc(), TournamentScore.id.asc())

    return db.execute(
        select(TournamentScore)
        .options(joinedload(TournamentScore.player))
        .where(TournamentScore.tournament_id == tournament_id)
        .order_by(*order)
    ).scalars().all()


def hole_scores_for(db: Session, score_id: int) -> list[HoleScore]:
    if not db.get(TournamentScore, score_id):
        raise NotFoundError("Score not found")

    return db.execute(
        select(HoleScore)
        .join(Hole, Hole.id == HoleScore.hole_id)
        .options(joinedload(HoleScore.hole))
        .where(HoleScore.tournament_score_id == score_id)
        .order_by(Hole.number.asc())
    ).scalars().all()


def delete_score(db: Session, score_id: int) -> None:
    score = db.execute(
        select(TournamentScore)
        .options(joinedload(TournamentScore.tournament))
        .where(TournamentScore.id == score_id)
    ).scalars().one_or_none()
    if not score:
        raise NotFoundError("Score not found")
    if score.tournament.is_completed:
        raise ConflictError("Cannot delete a score from a completed tournament")

    tournament_id = score.tournament_id
    db.delete(score)
    db.commit()
    logger.info("Score deleted", score_id=score_id, tournament_id=tournament_id)
