# tests/test_scores.py
from datetime import datetime, timedelta, timezone

import pytest

from leaderboard_service.models import Score


def test_submit_score(client, auth_headers, tokens):
    user_id = tokens.verify(auth_headers["Authorization"].split(" ")[1])

    r = client.post("/api/scores", json={"score": 42}, headers=auth_headers)
    assert r.status_code == 201, f"Esperado 201 pero se obtuvo {r.status_code}: {r.text}"

    record = r.json()
    assert record["user"] == user_id
    assert record["score"] == 42
    assert "createdAt" in record
    assert "id" in record


def test_submit_score_without_token(client, db):
    r = client.post("/api/scores", json={"score": 10})

    assert r.status_code == 401
    assert r.json()["detail"] == "No token"
    assert db.query(Score).count() == 0


def test_submit_score_with_invalid_token(client, db):
    r = client.post("/api/scores", json={"score": 10}, headers={"Authorization": "Bearer not-a-jwt"})

    assert r.status_code == 401
    assert r.json()["detail"] == "Invalid token"
    assert db.query(Score).count() == 0


def test_submit_score_with_token_for_unknown_user(client, tokens, db):
    """Un token bien firmado de un usuario inexistente da el mismo error que uno inválido."""
    headers = {"Authorization": f"Bearer {tokens.issue(9999)}"}
    r = client.post("/api/scores", json={"score": 10}, headers=headers)

    assert r.status_code == 401
    assert r.json()["detail"] == "Invalid token"
    assert db.query(Score).count() == 0


def test_submit_score_with_expired_token(client, register, tokens, db):
    user_id = register().json()["user"]["id"]
    issued_at = datetime.now(timezone.utc) - timedelta(days=7, seconds=1)
    headers = {"Authorization": f"Bearer {tokens.issue(user_id, issued_at=issued_at)}"}

    r = client.post("/api/scores", json={"score": 10}, headers=headers)
    assert r.status_code == 401
    assert r.json()["detail"] == "Invalid token"
    assert db.query(Score).count() == 0


@pytest.mark.parametrize("payload", [{}, {"score": None}, {"score": "abc"}, {"score": 0}, {"score": True}])
def test_submit_score_requires_numeric_score(client, auth_headers, db, payload):
    r = client.post("/api/scores", json=payload, headers=auth_headers)

    assert r.status_code == 400, f"Esperado 400 para {payload} pero se obtuvo {r.status_code}"
    assert r.json()["detail"] == "Score required"
    assert db.query(Score).count() == 0


def test_submit_fractional_score(client, auth_headers):
    r = client.post("/api/scores", json={"score": 7.5}, headers=auth_headers)
    assert r.status_code == 201
    assert r.json()["score"] == pytest.approx(7.5)


@pytest.mark.parametrize("raw", ["Infinity", "-Infinity", "NaN", "1e400", "1" + "0" * 400])
def test_submit_score_rejects_non_finite_numbers(client, auth_headers, db, raw):
    """Valores que el parser JSON acepta pero que no son un puntaje finito."""
    headers = {**auth_headers, "Content-Type": "application/json"}
    r = client.post("/api/scores", content=f'{{"score": {raw}}}', headers=headers)

    assert r.status_code == 400, f"Esperado 400 para {raw[:12]} pero se obtuvo {r.status_code}"
    assert r.json()["detail"] == "Score required"
    assert db.query(Score).count() == 0
    assert client.get("/api/leaderboard").json() == []
