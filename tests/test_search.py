"""
tests/test_search.py -- GET /search.

Coverage:
  - case-insensitive substring match on name and username
  - caller excluded, results ordered by name, capped at 20
  - blank / missing query 400
  - LIKE wildcards in the query are matched literally
"""

from __future__ import annotations

from fastapi.testclient import TestClient

SEARCH = "/api/v1/search"


def test_matches_name_and_username_case_insensitively(client: TestClient, make_user, auth_headers) -> None:
    me = make_user("me_user", name="Me")
    make_user("alice", name="Alice")
    make_user("kalina", name="Kalina")
    make_user("zed", name="Ali Veli")
    make_user("bob", name="Bob")

    resp = client.get(SEARCH, params={"q": "ALI"}, headers=auth_headers(me))
    assert resp.status_code == 200, resp.text
    names = [u["name"] for u in resp.json()]
    assert names == ["Ali Veli", "Alice", "Kalina"]


def test_caller_excluded(client: TestClient, make_user, auth_headers) -> None:
    alice = make_user("alice", name="Alice")
    make_user("alina", name="Alina")
    resp = client.get(SEARCH, params={"q": "ali"}, headers=auth_headers(alice))
    assert [u["username"] for u in resp.json()] == ["alina"]


def test_results_capped_at_twenty(client: TestClient, make_user, auth_headers) -> None:
    me = make_user("caller", name="Caller")
    for i in range(25):
        make_user(f"ali{i:02d}", name=f"Ali {i:02d}")
    resp = client.get(SEARCH, params={"q": "ali"}, headers=auth_headers(me))
    users = resp.json()
    assert len(users) == 20
    assert users[0]["name"] == "Ali 00"
    assert users[-1]["name"] == "Ali 19"


def test_result_cards_carry_counts(client: TestClient, make_user, auth_headers) -> None:
    me = make_user("caller", name="Caller")
    alice = make_user("alice", name="Alice")
    client.post(f"/api/v1/users/{alice.id}/follow", headers=auth_headers(me))
    user = client.get(SEARCH, params={"q": "alice"}, headers=auth_headers(me)).json()[0]
    assert user["followerCount"] == 1
    assert user["postCount"] == 0
    assert "email" not in user


def test_blank_query_rejected(client: TestClient, make_user, auth_headers) -> None:
    me = make_user("caller")
    for params in ({}, {"q": ""}, {"q": "   "}):
        resp = client.get(SEARCH, params=params, headers=auth_headers(me))
        assert resp.status_code == 400
        assert resp.json() == {"error": "Search term is required"}


def test_wildcards_match_literally(client: TestClient, make_user, auth_headers) -> None:
    me = make_user("caller", name="Caller")
    make_user("under_score", name="Under")
    make_user("underscore", name="Plain")
    resp = client.get(SEARCH, params={"q": "r_s"}, headers=auth_headers(me))
    assert [u["username"] for u in resp.json()] == ["under_score"]

    resp = client.get(SEARCH, params={"q": "%"}, headers=auth_headers(me))
    assert resp.json() == []


def test_requires_auth(client: TestClient) -> None:
    assert client.get(SEARCH, params={"q": "ali"}).status_code == 401
