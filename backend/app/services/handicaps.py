from datetime import datetime, timezone
from decimal import ROUND_HALF_UP, Decimal

import structlog
from sqlalchemy import select, update
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session, joinedload

from app.core.exceptions import AppError, ConflictError, DomainError, NotFoundError, ValidationError
from app.models.handicap_history import (
    REASON_INITIAL_HANDICAP,
    REASON_MANUAL_ADJUSTMENT,
    REASON_TOURNAMENT_LAST,
    REASON_TOURNAMENT_WIN,
    HandicapHistory,
)
from app.models.player import Player
from app.models.tournament import STATUS_COMPLETED, Tournament
from app.models.tournament_score import TournamentScore

logger = structlog.get_logger(__name__)

WINNER_ADJUSTMENT = -2
LAST_PLACE_ADJUSTMENT = 1

MANUAL_REASONS = (REASON_MANUAL_ADJUSTMENT, REASON_INITIAL_HANDICAP)

INDEX_PLACES = Decimal("0.1")


def _as_index(value) -> Decimal:
    return Decimal(str(value or 0)).quantize(INDEX_PLACES, rounding=ROUND_HALF_UP)


def _record_handicap(
    db: Session,
    player: Player,
    new_handicap: float | Decimal,
    reason: str,
    tournament_id: int | None = None,
) -> HandicapHistory:
    # Stored as a float, but always a one-decimal value.
    new_handicap = float(_as_index(new_handicap))
    old_handicap = player.current_handicap
    player.current_handicap = new_handicap

    entry = HandicapHistory(
        player_id=player.id,
        handicap_index=new_handicap,
        reason=reason,
        tournament_id=tournament_id,
        effective_date=datetime.now(timezone.utc),
    )
    db.add(entry)

    logger.info(
        "Handicap adjusted",
        player_id=player.id,
        old=old_handicap,
        new=new_handicap,
        reason=reason,
        tournament_id=tournament_id,
    )
    return entry


def _rank_and_adjust(db: Session, tournament_id: int) -> None:
    # Lowest net score wins, whatever the tournament format.
    scores = db.execute(
        select(TournamentScore)
        .options(joinedload(TournamentScore.player))
        .where(TournamentScore.tournament_id == tournament_id)
        .order_by(TournamentScore.net_score.asc(), TournamentScore.id.asc())
    ).scalars().all()

    if not scores:
        raise DomainError("No scores found for this tournament")

    last_index = len(scores) - 1
    for index, score in enumerate(scores):
        adjustment = 0
        reason = None
        if index == 0:
            adjustment = WINNER_ADJUSTMENT
            reason = REASON_TOURNAMENT_WIN
        elif index == last_index:
            adjustment = LAST_PLACE_ADJUSTMENT
            reason = REASON_TOURNAMENT_LAST

        score.position = index + 1
        score.handicap_adjustment = adjustment

        if adjustment:
            current = _as_index(score.player.current_handicap)
            _record_handicap(
                db,
                score.player,
                max(Decimal(0), current + adjustment),
                reason,
                tournament_id=tournament_id,
            )


def complete_tournament(db: Session, tournament_id: int) -> Tournament:
    """Mark a tournament completed; for majors, rank scores and adjust handicaps.

    Status change, positions, handicap updates and history rows commit as one
    unit. The status flip is a conditional update, so of two concurrent calls
    only one can succeed.
    """
    tournament = db.get(Tournament, tournament_id)
    if not tournament:
        raise NotFoundError("Tournament not found")
    if tournament.is_completed:
        raise ConflictError("Tournament already completed")

    is_major = tournament.is_major

    try:
        result = db.execute(
            update(Tournament)
            .where(Tournament.id == tournament_id, Tournament.status != STATUS_COMPLETED)
            .values(status=STATUS_COMPLETED)
            .execution_options(synchronize_session=False)
        )
        if result.rowcount == 0:
            raise ConflictError("Tournament already completed")

        if is_major:
            _rank_and_adjust(db, tournament_id)

        db.commit()
    except (AppError, SQLAlchemyError):
        db.rollback()
        raise

    logger.info("Tournament completed", tournament_id=tournament_id, is_major=is_major)

    db.refresh(tournament)
    return tournament


def manual_adjustment(
    db: Session,
    player_id: int,
    new_handicap: float,
    reason: str = REASON_MANUAL_ADJUSTMENT,
) -> Player:
    player = db.get(Player, player_id)
    if not player:
        raise NotFoundError("User not found")
    if new_handicap < 0:
        raise ValidationError("Handicap cannot be negative")
    if reason not in MANUAL_REASONS:
        raise ValidationError(f"Invalid reason: {reason}")

    try:
        _record_handicap(db, player, new_handicap, reason)
        db.commit()
    except SQLAlchemyError:
        db.rollback()
        raise

    logger.info(
        "Manual handicap adjustment",
        player_id=player.id,
        handicap=player.current_handicap,
        reason=reason,
    )

    db.refresh(player)
    return player


def handicap_history(db: Session, player_id: int) -> list[HandicapHistory]:
    if not db.get(Player, player_id):
        raise NotFoundError("User not found")

    return db.execute(
        select(HandicapHistory)
        .where(HandicapHistory.player_id == player_id)
        .order_by(HandicapHistory.effective_date.desc(), HandicapHistory.id.desc())
    ).scalars().all()
