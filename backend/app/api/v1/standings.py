import datetime

from fastapi import APIRouter, Depends, Query
from pydantic import BaseModel, ConfigDict
from sqlalchemy.orm import Session

from app.api.deps import ensure_player, get_current_user_id, get_db
from app.services.standings import year_standings

router = APIRouter()


class TournamentPointsOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    name: str
    points: int
    position: int


class PlayerStandingOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    player_id: str
    name: str
    tournaments: list[TournamentPointsOut]
    total_points: int
    best5_points: int
    average_points: float
    tournaments_played: int


class StandingsTournamentOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    name: str
    date: datetime.date


class YearStandingsOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    year: int
    tournaments: list[StandingsTournamentOut]
    standings: list[PlayerStandingOut]


@router.get("/standings/year", response_model=YearStandingsOut)
def get_year_standings(
    year: int | None = Query(default=None, ge=1900, le=9999),
    club_id: int | None = None,
    db: Session = Depends(get_db),
    user_id: str = Depends(get_current_user_id),
):
    # Without an explicit club, standings are for the caller's own club.
    if club_id is None:
        me = ensure_player(db, user_id)
        club_id = me.club_id
        db.commit()

    result = year_standings(db, club_id, year or datetime.date.today().year)
    return YearStandingsOut.model_validate(result)
