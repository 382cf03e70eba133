import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from app.api.deps import get_db
from app.db.base import Base
import app.models  # noqa: F401
from app.main import app


@pytest.fixture()
def client():
    engine = create_engine(
        "sqlite+pysqlite:///:memory:",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    TestingSessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)
    Base.metadata.create_all(bind=engine)

    def override_get_db():
        db = TestingSessionLocal()
        try:
            yield db
        finally:
            db.close()

    app.dependency_overrides[get_db] = override_get_db
    with TestClient(app) as c:
        yield c
    app.dependency_overrides.clear()


HEADERS = {"X-User-Id": "admin"}


def _tournament(client):
    course = client.post(
        "/api/v1/courses",
        json={
            "name": "Heathland",
            "holes": [{"number": i, "par": 4, "stroke_index": i} for i in range(1, 19)],
        },
        headers=HEADERS,
    ).json()
    return client.post(
        "/api/v1/tournaments",
        json={"course_id": course["id"], "name": "Autumn Medal", "tournament_date": "2026-10-03"},
        headers=HEADERS,
    ).json()


def _submit(client, t, player_id, **body):
    client.get("/api/v1/players/me", headers={"X-User-Id": player_id})
    r = client.post(
        "/api/v1/scores",
        json={"tournament_id": t["id"], "player_id": player_id, **body},
        headers=HEADERS,
    )
    assert r.status_code == 201


def _card(t, overrides):
    return [{"hole_id": h["id"], "strokes": overrides.get(h["number"], 4)} for h in t["holes"]]


def _stats(client, t):
    r = client.get(f"/api/v1/tournaments/{t['id']}/stats", headers=HEADERS)
    assert r.status_code == 200
    return r.json()


def test_tournament_highlights(client):
    t = _tournament(client)
    _submit(client, t, "a", hole_scores=_card(t, {3: 7, 5: 2}))  # 73
    _submit(client, t, "b", hole_scores=_card(t, {2: 7, 9: 9, 10: 2}))  # 78
    _submit(client, t, "c", gross_score=70)

    stats = _stats(client, t)
    assert stats["biggest_blowup_hole"] == {
        "player": "b",
        "hole": 9,
        "strokes": 9,
        "par": 4,
        "over_par": 5,
    }
    # a's 2 on hole 5 was entered before b's 2 on hole 10.
    assert stats["lowest_hole_score"] == {
        "player": "a",
        "hole": 5,
        "strokes": 2,
        "par": 4,
        "over_par": -2,
    }
    assert stats["best_gross_round"] == {
        "player": "c",
        "gross_score": 70,
        "course_par": 72,
        "to_par": -2,
    }
    assert stats["worst_gross_round"] == {
        "player": "b",
        "gross_score": 78,
        "course_par": 72,
        "to_par": 6,
    }


def test_equal_blowups_keep_the_first_entry(client):
    t = _tournament(client)
    _submit(client, t, "a", hole_scores=_card(t, {3: 7}))
    _submit(client, t, "b", hole_scores=_card(t, {1: 7}))

    blowup = _stats(client, t)["biggest_blowup_hole"]
    assert (blowup["player"], blowup["hole"]) == ("a", 3)


def test_gross_only_entries_have_no_hole_highlights(client):
    t = _tournament(client)
    _submit(client, t, "a", gross_score=80)
    _submit(client, t, "b", gross_score=75)

    stats = _stats(client, t)
    assert stats["biggest_blowup_hole"] is None
    assert stats["lowest_hole_score"] is None
    assert stats["best_gross_round"]["player"] == "b"
    assert stats["worst_gross_round"]["player"] == "a"
    assert stats["worst_gross_round"]["to_par"] == 8


def test_round_of_pars_has_no_blowup(client):
    t = _tournament(client)
    _submit(client, t, "a", hole_scores=_card(t, {}))

    stats = _stats(client, t)
    assert stats["biggest_blowup_hole"] is None
    assert stats["lowest_hole_score"]["hole"] == 1
    assert stats["best_gross_round"] == stats["worst_gross_round"]


def test_stats_without_scores(client):
    t = _tournament(client)
    assert _stats(client, t) == {
        "biggest_blowup_hole": None,
        "lowest_hole_score": None,
        "best_gross_round": None,
        "worst_gross_round": None,
    }


def test_stats_for_unknown_tournament(client):
    r = client.get("/api/v1/tournaments/404/stats", headers=HEADERS)
    assert r.status_code == 404
    assert r.json()["detail"] == "Tournament not found"
