from datetime import datetime
from typing import Literal

from fastapi import APIRouter, Depends
from pydantic import BaseModel, Field
from sqlalchemy.orm import Session

from app.api.deps import get_current_user_id, get_db, resolve_player
from app.services import handicaps as handicap_service

router = APIRouter()


class HandicapHistoryOut(BaseModel):
    id: int
    handicap_index: float
    reason: str
    tournament_id: int | None
    effective_date: datetime

    class Config:
        from_attributes = True


class HandicapAdjustIn(BaseModel):
    new_handicap: float = Field(ge=0, le=54)
    reason: Literal["manual_adjustment", "initial_handicap"] = "manual_adjustment"


class PlayerHandicapOut(BaseModel):
    player_id: str
    name: str
    current_handicap: float | None


@router.get("/handicaps/user/{player_id}", response_model=list[HandicapHistoryOut])
def get_handicap_history(
    player_id: str,
    db: Session = Depends(get_db),
    _user_id: str = Depends(get_current_user_id),
):
    player = resolve_player(db, player_id)
    return handicap_service.handicap_history(db, player.id)


@router.post("/handicaps/user/{player_id}/adjust", response_model=PlayerHandicapOut)
def adjust_handicap(
    player_id: str,
    payload: HandicapAdjustIn,
    db: Session = Depends(get_db),
    _user_id: str = Depends(get_current_user_id),
):
    player = resolve_player(db, player_id)
    player = handicap_service.manual_adjustment(
        db, player.id, payload.new_handicap, reason=payload.reason
    )
    return PlayerHandicapOut(
        player_id=player.external_id,
        name=player.label,
        current_handicap=player.current_handicap,
    )
