import time

import pytest
from fastapi.testclient import TestClient
from jose import jwt
from jose.utils import base64url_encode
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from app.api import deps
from app.api.deps import get_db
from app.core.settings import settings
from app.db.base import Base
import app.models  # noqa: F401
from app.main import app


def _make_rsa_keypair_jwk(*, kid: str):
    from cryptography.hazmat.primitives import serialization
    from cryptography.hazmat.primitives.asymmetric import rsa

    private_key = rsa.generate_private_key(public_exponent=65537, key_size=2048)
    private_pem = private_key.private_bytes(
        encoding=serialization.Encoding.PEM,
        format=serialization.PrivateFormat.PKCS8,
        encryption_algorithm=serialization.NoEncryption(),
    ).decode("utf-8")

    pub = private_key.public_key().public_numbers()
    n = base64url_encode(pub.n.to_bytes((pub.n.bit_length() + 7) // 8, "big")).decode("utf-8")
    e = base64url_encode(pub.e.to_bytes((pub.e.bit_length() + 7) // 8, "big")).decode("utf-8")

    jwk = {"kty": "RSA", "kid": kid, "use": "sig", "alg": "RS256", "n": n, "e": e}
    return private_pem, jwk


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


@pytest.fixture()
def auth0(monkeypatch):
    monkeypatch.setattr(settings, "AUTH0_DOMAIN", "example.test")
    monkeypatch.setattr(settings, "AUTH0_AUDIENCE", "https://golf-api")

    private_pem, jwk = _make_rsa_keypair_jwk(kid="test-kid")
    monkeypatch.setattr(deps, "_JWKS_CACHE", None)
    monkeypatch.setattr(deps, "_JWKS_CACHE_UNTIL", 0)
    monkeypatch.setattr(deps, "_get_jwks", lambda: {"keys": [jwk]})

    def make_token(sub: str, **overrides) -> str:
        claims = {
            "sub": sub,
            "aud": settings.AUTH0_AUDIENCE,
            "iss": f"https://{settings.AUTH0_DOMAIN}/",
            "exp": int(time.time()) + 60,
            **overrides,
        }
        return jwt.encode(claims, private_pem, algorithm="RS256", headers={"kid": "test-kid"})

    return make_token


def test_players_me_with_mocked_jwks(client, auth0):
    token = auth0("auth0|user123")

    missing = client.get("/api/v1/players/me")
    assert missing.status_code == 401

    resp = client.get("/api/v1/players/me", headers={"Authorization": f"Bearer {token}"})
    assert resp.status_code == 200
    assert resp.json()["external_id"] == "auth0|user123"
    assert resp.json()["current_handicap"] is None


def test_scoring_endpoints_reject_bad_tokens(client, auth0):
    # X-User-Id is ignored once Auth0 is configured.
    r = client.get("/api/v1/handicaps/user/u1", headers={"X-User-Id": "u1"})
    assert r.status_code == 401

    r = client.get("/api/v1/standings/year", headers={"Authorization": "Token abc"})
    assert r.status_code == 401
    assert r.json()["detail"] == "Invalid Authorization header"

    expired = auth0("auth0|user123", exp=int(time.time()) - 60)
    r = client.get("/api/v1/standings/year", headers={"Authorization": f"Bearer {expired}"})
    assert r.status_code == 401
    assert r.json()["detail"] == "Invalid token"

    wrong_aud = auth0("auth0|user123", aud="https://someone-else")
    r = client.get("/api/v1/standings/year", headers={"Authorization": f"Bearer {wrong_aud}"})
    assert r.status_code == 401

    ok = auth0("auth0|user123")
    r = client.get("/api/v1/standings/year", headers={"Authorization": f"Bearer {ok}"})
    assert r.status_code == 200
