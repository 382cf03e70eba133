"""Season standings ("golfer of the year").

Each completed tournament awards points by finishing position; a player's
season total is the sum of their best five results.
"""

from dataclasses import dataclass, field
from datetime import date
from decimal import ROUND_HALF_UP, Decimal

from sqlalchemy import select
from sqlalchemy.orm import Session, selectinload

from app.models.tournament import STATUS_COMPLETED, Tournament
from app.models.tournament_score import TournamentScore

BEST_OF = 5

# Points for positions 1-10; later positions lose a point each, down to MIN_POINTS.
POSITION_POINTS = (50, 45, 40, 37, 35, 33, 31, 30, 29, 28)
MIN_POINTS = 10


def points_for_position(position: int) -> int:
    if 1 <= position <= len(POSITION_POINTS):
        return POSITION_POINTS[position - 1]
    return max(MIN_POINTS, POSITION_POINTS[-1] - (position - len(POSITION_POINTS)))


@dataclass
class TournamentResult:
    name: str
    points: int
    position: int


@dataclass
class PlayerStanding:
    player_id: str
    name: str
    tournaments: list[TournamentResult] = field(default_factory=list)
    total_points: int = 0
    best5_points: int = 0
    average_points: float = 0.0
    tournaments_played: int = 0


@dataclass
class StandingsTournament:
    id: int
    name: str
    date: date


@dataclass
class YearStandings:
    year: int
    tournaments: list[StandingsTournament]
    standings: list[PlayerStanding]


def _average(total: int, count: int) -> float:
    if not count:
        return 0.0
    value = Decimal(total) / Decimal(count)
    return float(value.quantize(Decimal("0.1"), rounding=ROUND_HALF_UP))


def year_standings(db: Session, club_id: int | None, year: int) -> YearStandings:
    club_clause = Tournament.club_id.is_(None) if club_id is None else Tournament.club_id == club_id

    tournaments = db.execute(
        select(Tournament)
        .options(selectinload(Tournament.scores).selectinload(TournamentScore.player))
        .where(
            club_clause,
            Tournament.status == STATUS_COMPLETED,
            Tournament.tournament_date >= date(year, 1, 1),
            Tournament.tournament_date <= date(year, 12, 31),
        )
        .order_by(Tournament.tournament_date.asc(), Tournament.id.asc())
    ).scalars().all()

    by_player: dict[int, PlayerStanding] = {}
    for t in tournaments:
        scores = sorted(t.scores, key=lambda s: (s.net_score, s.id))
        for index, score in enumerate(scores):
            position = score.position or index + 1
            points = points_for_position(position)

            standing = by_player.get(score.player_id)
            if standing is None:
                standing = PlayerStanding(
                    player_id=score.player.external_id, name=score.player.label
                )
                by_player[score.player_id] = standing

            standing.tournaments.append(TournamentResult(name=t.name, points=points, position=position))
            standing.total_points += points
            standing.tournaments_played += 1

    for standing in by_player.values():
        best = sorted((r.points for r in standing.tournaments), reverse=True)[:BEST_OF]
        standing.best5_points = sum(best)
        standing.average_points = _average(standing.total_points, standing.tournaments_played)

    # sorted() is stable: equal best-5 totals keep first-seen order.
    standings = sorted(by_player.values(), key=lambda s: s.best5_points, reverse=True)

    return YearStandings(
        year=year,
        tournaments=[StandingsTournament(id=t.id, name=t.name, date=t.tournament_date) for t in tournaments],
        standings=standings,
    )
