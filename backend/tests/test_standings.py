from datetime import date

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from app.api.deps import get_db
from app.db.base import Base
import app.models  # noqa: F401
from app.models.club import Club
from app.models.course import Course
from app.models.player import Player
from app.models.tournament import Tournament
from app.models.tournament_participant import TournamentParticipant
from app.models.tournament_score import TournamentScore
from app.main import app
from app.services.standings import year_standings


@pytest.fixture()
def session_factory():
    engine = create_engine(
        "sqlite+pysqlite:///:memory:",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    Base.metadata.create_all(bind=engine)
    return sessionmaker(autocommit=False, autoflush=False, bind=engine)


@pytest.fixture()
def db(session_factory):
    session = session_factory()
    try:
        yield session
    finally:
        session.close()


@pytest.fixture()
def client(session_factory):
    def override_get_db():
        db = session_factory()
        try:
            yield db
        finally:
            db.close()

    app.dependency_overrides[get_db] = override_get_db
    with TestClient(app) as c:
        yield c
    app.dependency_overrides.clear()


def _club(db, name="Old Course GS"):
    club = Club(name=name)
    db.add(club)
    db.flush()
    return club


def _players(db, *names, club=None):
    out = []
    for n in names:
        p = Player(external_id=n, name=n.title(), club_id=club.id if club else None)
        db.add(p)
        out.append(p)
    db.flush()
    return out


def _tournament(db, club, name, when, results, status="completed"):
    """results: list of (player, net_score, position or None)."""
    course = Course(name=f"{name} course")
    db.add(course)
    db.flush()

    t = Tournament(
        club_id=club.id if club else None,
        course_id=course.id,
        name=name,
        status=status,
        tournament_date=when,
    )
    db.add(t)
    db.flush()

    for player, net, position in results:
        part = TournamentParticipant(tournament_id=t.id, player_id=player.id)
        db.add(part)
        db.flush()
        db.add(
            TournamentScore(
                tournament_id=t.id,
                participant_id=part.id,
                player_id=player.id,
                gross_score=net,
                handicap_at_time=0,
                net_score=net,
                position=position,
            )
        )
    db.flush()
    return t


def test_best_five_of_six(db):
    club = _club(db)
    (alice,) = _players(db, "alice", club=club)

    # Positions 1, 2, 3, 5, 8, 30 -> 50, 45, 40, 35, 30, 10 points.
    for month, position in zip(range(1, 7), (1, 2, 3, 5, 8, 30)):
        _tournament(db, club, f"Round {month}", date(2025, month, 10), [(alice, 70, position)])
    db.commit()

    result = year_standings(db, club.id, 2025)
    assert len(result.tournaments) == 6
    assert [t.name for t in result.tournaments] == [f"Round {m}" for m in range(1, 7)]

    (row,) = result.standings
    assert row.player_id == "alice"
    assert row.name == "Alice"
    assert row.tournaments_played == 6
    assert row.total_points == 210
    assert row.best5_points == 200
    assert row.average_points == 35.0
    assert [r.points for r in row.tournaments] == [50, 45, 40, 35, 30, 10]


def test_positions_fall_back_to_net_score_order(db):
    club = _club(db)
    a, b, c = _players(db, "a", "b", "c", club=club)
    _tournament(db, club, "Unranked", date(2025, 5, 1), [(a, 75, None), (b, 70, None), (c, 80, None)])
    db.commit()

    standings = year_standings(db, club.id, 2025).standings
    assert [(s.player_id, s.best5_points) for s in standings] == [("b", 50), ("a", 45), ("c", 40)]
    assert [s.tournaments[0].position for s in standings] == [1, 2, 3]


def test_only_completed_tournaments_of_the_year_and_club(db):
    club = _club(db)
    other = _club(db, "Elsewhere")
    a, b = _players(db, "a", "b", club=club)

    _tournament(db, club, "Counted", date(2025, 12, 31), [(a, 70, 1), (b, 72, 2)])
    _tournament(db, club, "New Year", date(2025, 1, 1), [(b, 70, 1)])
    _tournament(db, club, "Last season", date(2024, 12, 31), [(b, 70, 1)])
    _tournament(db, club, "Not played yet", date(2025, 8, 1), [(b, 70, 1)], status="upcoming")
    _tournament(db, other, "Other club", date(2025, 6, 1), [(b, 70, 1)])
    db.commit()

    result = year_standings(db, club.id, 2025)
    assert [t.name for t in result.tournaments] == ["New Year", "Counted"]

    by_player = {s.player_id: s for s in result.standings}
    assert by_player["a"].total_points == 50
    assert by_player["b"].total_points == 95
    assert by_player["b"].tournaments_played == 2
    assert [s.player_id for s in result.standings] == ["b", "a"]


def test_average_rounds_half_up(db):
    club = _club(db)
    (p,) = _players(db, "p", club=club)
    # 50 + 45 + 33 + 13 = 141 over 4 events -> 35.25 -> 35.3
    for i, position in enumerate((1, 2, 6, 25)):
        _tournament(db, club, f"E{i}", date(2025, 3, i + 1), [(p, 70, position)])
    db.commit()

    (row,) = year_standings(db, club.id, 2025).standings
    assert row.total_points == 141
    assert row.average_points == 35.3


def test_ties_keep_first_seen_order(db):
    club = _club(db)
    a, b = _players(db, "a", "b", club=club)
    _tournament(db, club, "One", date(2025, 4, 1), [(a, 70, 1), (b, 71, 2)])
    _tournament(db, club, "Two", date(2025, 5, 1), [(b, 70, 1), (a, 71, 2)])
    db.commit()

    standings = year_standings(db, club.id, 2025).standings
    assert [s.best5_points for s in standings] == [95, 95]
    assert [s.player_id for s in standings] == ["a", "b"]


def test_empty_year(db):
    club = _club(db)
    db.commit()

    result = year_standings(db, club.id, 2030)
    assert result.year == 2030
    assert result.tournaments == []
    assert result.standings == []


def test_year_standings_endpoint_uses_callers_club(client, db):
    club = _club(db)
    a, b = _players(db, "a", "b", club=club)
    _tournament(db, club, "Spring", date(2025, 4, 1), [(a, 70, 1), (b, 71, 2)])
    _tournament(db, None, "Casual", date(2025, 4, 2), [(b, 68, 1)])
    db.commit()

    r = client.get("/api/v1/standings/year?year=2025", headers={"X-User-Id": "a"})
    assert r.status_code == 200
    data = r.json()
    assert data["year"] == 2025
    assert data["tournaments"] == [{"id": 1, "name": "Spring", "date": "2025-04-01"}]
    assert data["standings"][0] == {
        "player_id": "a",
        "name": "A",
        "tournaments": [{"name": "Spring", "points": 50, "position": 1}],
        "total_points": 50,
        "best5_points": 50,
        "average_points": 50.0,
        "tournaments_played": 1,
    }

    # A player without a club sees club-less tournaments.
    r = client.get("/api/v1/standings/year?year=2025", headers={"X-User-Id": "loner"})
    assert [t["name"] for t in r.json()["tournaments"]] == ["Casual"]

    r = client.get(
        f"/api/v1/standings/year?year=2025&club_id={club.id}", headers={"X-User-Id": "loner"}
    )
    assert [t["name"] for t in r.json()["tournaments"]] == ["Spring"]


def test_year_defaults_to_current_year(client):
    r = client.get("/api/v1/standings/year", headers={"X-User-Id": "a"})
    assert r.status_code == 200
    assert r.json()["year"] == date.today().year
