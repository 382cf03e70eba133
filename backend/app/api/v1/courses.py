from fastapi import APIRouter, Depends, HTTPException
from pydantic import BaseModel, Field, field_validator
from sqlalchemy import select
from sqlalchemy.orm import Session, joinedload

from app.api.deps import get_current_user_id, get_db
from app.models.course import Course, Hole

router = APIRouter()


class HoleIn(BaseModel):
    number: int = Field(ge=1, le=18)
    par: int = Field(ge=1, le=10)
    stroke_index: int | None = Field(default=None, ge=1, le=18)
    distance: int | None = Field(default=None, ge=1, le=2000)


class HoleOut(HoleIn):
    id: int

    class Config:
        from_attributes = True


class CourseCreate(BaseModel):
    name: str = Field(min_length=1, max_length=200)
    holes: list[HoleIn]

    @field_validator("holes")
    @classmethod
    def validate_holes(cls, holes: list[HoleIn]) -> list[HoleIn]:
        if len(holes) not in (9, 18):
            raise ValueError("holes must be length 9 or 18")
        numbers = [h.number for h in holes]
        if len(set(numbers)) != len(numbers):
            raise ValueError("hole numbers must be unique")

        indexes = [h.stroke_index for h in holes if h.stroke_index is not None]
        if len(set(indexes)) != len(indexes):
            raise ValueError("stroke_index must be unique per course")

        return holes


class CourseOut(BaseModel):
    id: int
    name: str
    par: int
    holes: list[HoleOut]

    class Config:
        from_attributes = True


def _load_course(db: Session, course_id: int) -> Course | None:
    return db.execute(
        select(Course).options(joinedload(Course.holes)).where(Course.id == course_id)
    ).scalars().unique().one_or_none()


@router.post("/courses", response_model=CourseOut, status_code=201)
def create_course(
    payload: CourseCreate,
    db: Session = Depends(get_db),
    _user_id: str = Depends(get_current_user_id),
):
    course = Course(name=payload.name.strip())
    course.holes = [
        Hole(number=h.number, par=h.par, stroke_index=h.stroke_index, distance=h.distance)
        for h in sorted(payload.holes, key=lambda x: x.number)
    ]
    db.add(course)
    db.commit()

    return _load_course(db, course.id)


@router.get("/courses", response_model=list[CourseOut])
def list_courses(
    db: Session = Depends(get_db),
    _user_id: str = Depends(get_current_user_id),
):
    stmt = select(Course).options(joinedload(Course.holes)).order_by(Course.id)
    return db.execute(stmt).scalars().unique().all()


@router.get("/courses/{course_id}", response_model=CourseOut)
def get_course(
    course_id: int,
    db: Session = Depends(get_db),
    _user_id: str = Depends(get_current_user_id),
):
    course = _load_course(db, course_id)
    if not course:
        raise HTTPException(status_code=404, detail="Course not found")
    return course
