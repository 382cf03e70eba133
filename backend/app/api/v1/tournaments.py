from datetime import date, datetime

from fastapi import APIRouter, Depends, HTTPException
from pydantic import BaseModel, ConfigDict, Field
from sqlalchemy import select
from sqlalchemy.orm import Session, joinedload

from app.api.deps import get_current_user_id, get_db
from app.models.club import Club
from app.models.course import Course
from app.models.tournament import FORMAT_STROKE_PLAY, Tournament
from app.services.stats import tournament_stats

router = APIRouter()


class TournamentCreate(BaseModel):
    course_id: int
    club_id: int | None = None
    name: str = Field(min_length=1, max_length=128)
    format: str = Field(default=FORMAT_STROKE_PLAY, min_length=1, max_length=32)
    is_major: bool = False
    tournament_date: date


class TournamentHoleOut(BaseModel):
    id: int
    number: int
    par: int
    stroke_index: int | None


class TournamentOut(BaseModel):
    id: int
    name: str
    club_id: int | None
    course_id: int
    course_name: str
    course_par: int
    format: str
    is_major: bool
    status: str
    tournament_date: date
    created_at: datetime
    holes: list[TournamentHoleOut]


class HoleHighlightOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    player: str
    hole: int
    strokes: int
    par: int
    over_par: int


class RoundHighlightOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    player: str
    gross_score: int
    course_par: int
    to_par: int


class TournamentStatsOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    biggest_blowup_hole: HoleHighlightOut | None
    lowest_hole_score: HoleHighlightOut | None
    best_gross_round: RoundHighlightOut | None
    worst_gross_round: RoundHighlightOut | None


def _tournament_to_out(t: Tournament) -> TournamentOut:
    return TournamentOut(
        id=t.id,
        name=t.name,
        club_id=t.club_id,
        course_id=t.course_id,
        course_name=t.course.name,
        course_par=t.course.par,
        format=t.format,
        is_major=t.is_major,
        status=t.status,
        tournament_date=t.tournament_date,
        created_at=t.created_at,
        holes=[
            TournamentHoleOut(id=h.id, number=h.number, par=h.par, stroke_index=h.stroke_index)
            for h in t.course.holes
        ],
    )


@router.post("/tournaments", response_model=TournamentOut, status_code=201)
def create_tournament(
    payload: TournamentCreate,
    db: Session = Depends(get_db),
    user_id: str = Depends(get_current_user_id),
):
    course = db.execute(select(Course).where(Course.id == payload.course_id)).scalars().one_or_none()
    if not course:
        raise HTTPException(status_code=404, detail="Course not found")

    if payload.club_id is not None and not db.get(Club, payload.club_id):
        raise HTTPException(status_code=404, detail="Club not found")

    t = Tournament(
        club_id=payload.club_id,
        course_id=course.id,
        name=payload.name.strip(),
        format=payload.format.strip(),
        is_major=payload.is_major,
        tournament_date=payload.tournament_date,
    )
    db.add(t)
    db.commit()

    return get_tournament(t.id, db=db, user_id=user_id)


@router.get("/tournaments", response_model=list[TournamentOut])
def list_tournaments(
    club_id: int | None = None,
    db: Session = Depends(get_db),
    _user_id: str = Depends(get_current_user_id),
):
    stmt = select(Tournament).options(joinedload(Tournament.course).joinedload(Course.holes))
    if club_id is not None:
        stmt = stmt.where(Tournament.club_id == club_id)
    rows = db.execute(
        stmt.order_by(Tournament.tournament_date.desc(), Tournament.id.desc())
    ).scalars().unique().all()
    return [_tournament_to_out(t) for t in rows]


@router.get("/tournaments/{tournament_id}", response_model=TournamentOut)
def get_tournament(
    tournament_id: int,
    db: Session = Depends(get_db),
    user_id: str = Depends(get_current_user_id),
):
    t = db.execute(
        select(Tournament)
        .options(joinedload(Tournament.course).joinedload(Course.holes))
        .where(Tournament.id == tournament_id)
    ).scalars().unique().one_or_none()
    if not t:
        raise HTTPException(status_code=404, detail="Tournament not found")
    return _tournament_to_out(t)


@router.get("/tournaments/{tournament_id}/stats", response_model=TournamentStatsOut)
def get_tournament_stats(
    tournament_id: int,
    db: Session = Depends(get_db),
    _user_id: str = Depends(get_current_user_id),
):
    return TournamentStatsOut.model_validate(tournament_stats(db, tournament_id))
