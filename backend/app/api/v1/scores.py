from fastapi import APIRouter, Depends, Response
from pydantic import BaseModel, Field
from sqlalchemy import select
from sqlalchemy.orm import Session, joinedload

from app.api.deps import get_current_user_id, get_db, resolve_player
from app.models.tournament import Tournament
from app.models.tournament_score import HoleScore, TournamentScore
from app.services import handicaps as handicap_service
from app.services import scores as score_service

router = APIRouter()


class HoleScoreIn(BaseModel):
    hole_id: int
    # Range (1-15) is enforced by the score service so it reports a 400 like other rule errors.
    strokes: int
    putts: int | None = Field(default=None, ge=0, le=10)
    fairway_hit: bool | None = None
    green_in_regulation: bool | None = None


class ScoreSubmit(BaseModel):
    tournament_id: int
    player_id: str = Field(min_length=1, max_length=128)
    gross_score: int | None = Field(default=None, ge=0, le=200)
    hole_scores: list[HoleScoreIn] | None = None


class HoleScoreOut(BaseModel):
    id: int
    hole_id: int
    hole_number: int
    par: int
    stroke_index: int | None
    strokes: int
    stableford_points: int | None
    putts: int | None
    fairway_hit: bool | None
    green_in_regulation: bool | None


class ScoreOut(BaseModel):
    id: int
    tournament_id: int
    player_id: str
    player_name: str
    gross_score: int
    handicap_at_time: float
    net_score: int
    stableford_points: int | None
    position: int | None
    handicap_adjustment: int
    current_handicap: float | None


class ScoreDetailOut(ScoreOut):
    holes: list[HoleScoreOut]


class TournamentResultOut(BaseModel):
    id: int
    name: str
    format: str
    is_major: bool
    status: str
    scores: list[ScoreOut]


def _hole_to_out(hs: HoleScore) -> HoleScoreOut:
    return HoleScoreOut(
        id=hs.id,
        hole_id=hs.hole_id,
        hole_number=hs.hole.number,
        par=hs.hole.par,
        stroke_index=hs.hole.stroke_index,
        strokes=hs.strokes,
        stableford_points=hs.stableford_points,
        putts=hs.putts,
        fairway_hit=hs.fairway_hit,
        green_in_regulation=hs.green_in_regulation,
    )


def _score_to_out(score: TournamentScore) -> ScoreOut:
    return ScoreOut(
        id=score.id,
        tournament_id=score.tournament_id,
        player_id=score.player.external_id,
        player_name=score.player.label,
        gross_score=score.gross_score,
        handicap_at_time=score.handicap_at_time,
        net_score=score.net_score,
        stableford_points=score.stableford_points,
        position=score.position,
        handicap_adjustment=score.handicap_adjustment,
        current_handicap=score.player.current_handicap,
    )


@router.post("/scores", response_model=ScoreDetailOut, status_code=201)
def submit_score(
    payload: ScoreSubmit,
    response: Response,
    db: Session = Depends(get_db),
    _user_id: str = Depends(get_current_user_id),
):
    player = resolve_player(db, payload.player_id)

    entries = None
    if payload.hole_scores is not None:
        entries = [score_service.HoleScoreEntry(**hs.model_dump()) for hs in payload.hole_scores]

    score, created = score_service.submit_score(
        db,
        tournament_id=payload.tournament_id,
        player_id=player.id,
        gross_score=payload.gross_score,
        hole_scores=entries,
    )
    if not created:
        response.status_code = 200

    holes = sorted(score.hole_scores, key=lambda hs: hs.hole.number)
    return ScoreDetailOut(
        **_score_to_out(score).model_dump(),
        holes=[_hole_to_out(hs) for hs in holes],
    )


@router.get("/scores/tournament/{tournament_id}", response_model=list[ScoreOut])
def get_leaderboard(
    tournament_id: int,
    db: Session = Depends(get_db),
    _user_id: str = Depends(get_current_user_id),
):
    return [_score_to_out(s) for s in score_service.leaderboard(db, tournament_id)]


@router.post("/scores/tournament/{tournament_id}/complete", response_model=TournamentResultOut)
def complete_tournament(
    tournament_id: int,
    db: Session = Depends(get_db),
    _user_id: str = Depends(get_current_user_id),
):
    handicap_service.complete_tournament(db, tournament_id)

    t = db.execute(select(Tournament).where(Tournament.id == tournament_id)).scalars().one()
    scores = db.execute(
        select(TournamentScore)
        .options(joinedload(TournamentScore.player))
        .where(TournamentScore.tournament_id == tournament_id)
        .order_by(TournamentScore.net_score.asc(), TournamentScore.id.asc())
    ).scalars().all()

    return TournamentResultOut(
        id=t.id,
        name=t.name,
        format=t.format,
        is_major=t.is_major,
        status=t.status,
        scores=[_score_to_out(s) for s in scores],
    )


@router.get("/scores/{score_id}/holes", response_model=list[HoleScoreOut])
def get_hole_scores(
    score_id: int,
    db: Session = Depends(get_db),
    _user_id: str = Depends(get_current_user_id),
):
    return [_hole_to_out(hs) for hs in score_service.hole_scores_for(db, score_id)]


@router.delete("/scores/{score_id}")
def delete_score(
    score_id: int,
    db: Session = Depends(get_db),
    _user_id: str = Depends(get_current_user_id),
):
    score_service.delete_score(db, score_id)
    return {"ok": True}
