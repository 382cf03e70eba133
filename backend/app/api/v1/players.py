from fastapi import APIRouter, Depends, HTTPException
from pydantic import BaseModel
from sqlalchemy import select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from app.api.deps import ensure_player, get_current_user_id, get_db
from app.models.club import Club
from app.models.player import Player

router = APIRouter()


class PlayerOut(BaseModel):
    id: int
    external_id: str
    email: str | None
    username: str | None
    name: str | None
    club_id: int | None
    current_handicap: float | None

    class Config:
        from_attributes = True


class PlayerMeUpdateIn(BaseModel):
    # Handicap is not editable here; it changes through /handicaps only.
    email: str | None = None
    username: str | None = None
    name: str | None = None
    club_id: int | None = None


@router.get("/players/me", response_model=PlayerOut)
def upsert_me(
    db: Session = Depends(get_db),
    user_id: str = Depends(get_current_user_id),
):
    player = ensure_player(db, user_id)
    db.commit()
    db.refresh(player)
    return player


@router.patch("/players/me", response_model=PlayerOut)
def update_me(
    payload: PlayerMeUpdateIn,
    db: Session = Depends(get_db),
    user_id: str = Depends(get_current_user_id),
):
    player = ensure_player(db, user_id)

    if payload.email is not None:
        player.email = payload.email.strip().lower() or None
    if payload.username is not None:
        player.username = payload.username.strip() or None
    if payload.name is not None:
        player.name = payload.name.strip() or None
    if payload.club_id is not None:
        if not db.get(Club, payload.club_id):
            raise HTTPException(status_code=404, detail="Club not found")
        player.club_id = payload.club_id

    try:
        db.commit()
    except IntegrityError:
        db.rollback()
        raise HTTPException(status_code=409, detail="email/username already in use")

    db.refresh(player)
    return player


@router.get("/players/{external_id}", response_model=PlayerOut)
def get_player(
    external_id: str,
    db: Session = Depends(get_db),
    _user_id: str = Depends(get_current_user_id),
):
    p = db.execute(select(Player).where(Player.external_id == external_id)).scalars().one_or_none()
    if not p:
        raise HTTPException(status_code=404, detail="Player not found")

    out = PlayerOut.model_validate(p)
    out.email = None
    return out
