"""
tests/test_posts.py -- Post creation, listing, deletion and the like toggle.

Coverage:
  - POST /posts: 201 with owner info, imageUrl required, coordinate bounds
  - GET /posts: newest first, placeId filter, likeCount / isLiked per caller
  - DELETE /posts/{id}: owner only (403), 404, likes removed with the post
  - POST /posts/{id}/like: added/removed alternation, counts, 404,
    and recovery when a concurrent request inserted or removed the same like first
  - stored images are only deleted once nothing references them
"""

from __future__ import annotations

import logging
from pathlib import Path

from fastapi.testclient import TestClient
from sqlalchemy import func, select

from app.config import settings
from app.crud import ToggleState, crud_like
from app.models.like import Like
from app.models.post import Post

POSTS = "/api/v1/posts"


def _create(client: TestClient, headers: dict, **fields) -> dict:
    body = {"imageUrl": "http://localhost:8000/uploads/photos/posts/a.jpg"}
    body.update(fields)
    resp = client.post(POSTS, json=body, headers=headers)
    assert resp.status_code == 201, resp.text
    return resp.json()


class TestCreatePost:
    def test_create_returns_post_with_owner(self, client: TestClient, make_user, auth_headers) -> None:
        ann = make_user("ann")
        post = _create(
            client,
            auth_headers(ann),
            caption="Galata at dusk",
            location="Galata Tower",
            placeId="place-1",
            latitude=41.0256,
            longitude=28.9742,
        )
        assert post["userId"] == ann.id
        assert post["user"] == {"id": ann.id, "name": "Ann", "username": "ann", "profileImage": None}
        assert post["caption"] == "Galata at dusk"
        assert post["placeId"] == "place-1"
        assert post["latitude"] == 41.0256
        assert post["likeCount"] == 0
        assert post["isLiked"] is False

    def test_image_url_required(self, client: TestClient, make_user, auth_headers) -> None:
        ann = make_user("ann")
        resp = client.post(POSTS, json={"caption": "no image"}, headers=auth_headers(ann))
        assert resp.status_code == 400
        assert "error" in resp.json()

    def test_latitude_out_of_range(self, client: TestClient, make_user, auth_headers) -> None:
        ann = make_user("ann")
        resp = client.post(POSTS, json={"imageUrl": "http://h/a.jpg", "latitude": 120}, headers=auth_headers(ann))
        assert resp.status_code == 400

    def test_requires_auth(self, client: TestClient) -> None:
        resp = client.post(POSTS, json={"imageUrl": "http://h/a.jpg"})
        assert resp.status_code == 401

    def test_account_deleted_after_token_issued(self, client: TestClient, db, make_user, auth_headers) -> None:
        ann = make_user("ann")
        headers = auth_headers(ann)
        db.delete(ann)
        db.commit()
        resp = client.post(POSTS, json={"imageUrl": "http://h/a.jpg"}, headers=headers)
        assert resp.status_code == 404


class TestListPosts:
    def test_newest_first_with_like_info(self, client: TestClient, make_user, auth_headers) -> None:
        ann = make_user("ann")
        bob = make_user("bob")
        first = _create(client, auth_headers(ann), caption="first")
        second = _create(client, auth_headers(bob), caption="second")
        client.post(f"{POSTS}/{first['id']}/like", headers=auth_headers(bob))

        resp = client.get(POSTS, headers=auth_headers(bob))
        assert resp.status_code == 200
        posts = resp.json()
        assert [p["id"] for p in posts] == [second["id"], first["id"]]
        assert posts[1]["likeCount"] == 1
        assert posts[1]["isLiked"] is True

        as_ann = client.get(POSTS, headers=auth_headers(ann)).json()
        assert as_ann[1]["likeCount"] == 1
        assert as_ann[1]["isLiked"] is False

    def test_filter_by_place(self, client: TestClient, make_user, auth_headers) -> None:
        ann = make_user("ann")
        tagged = _create(client, auth_headers(ann), placeId="place-1")
        _create(client, auth_headers(ann), placeId="place-2")
        _create(client, auth_headers(ann))

        resp = client.get(POSTS, params={"placeId": "place-1"}, headers=auth_headers(ann))
        assert [p["id"] for p in resp.json()] == [tagged["id"]]


class TestDeletePost:
    def test_owner_deletes_post_and_its_likes(self, client: TestClient, db, make_user, auth_headers) -> None:
        ann = make_user("ann")
        bob = make_user("bob")
        post = _create(client, auth_headers(ann))
        client.post(f"{POSTS}/{post['id']}/like", headers=auth_headers(bob))

        resp = client.delete(f"{POSTS}/{post['id']}", headers=auth_headers(ann))
        assert resp.status_code == 200
        assert resp.json() == {"success": True}
        assert db.scalar(select(func.count(Post.id))) == 0
        assert db.scalar(select(func.count(Like.id))) == 0

    def test_other_user_forbidden(self, client: TestClient, make_user, auth_headers) -> None:
        ann = make_user("ann")
        bob = make_user("bob")
        post = _create(client, auth_headers(ann))
        resp = client.delete(f"{POSTS}/{post['id']}", headers=auth_headers(bob))
        assert resp.status_code == 403
        assert resp.json() == {"error": "You can only delete your own posts"}

    def test_missing_post(self, client: TestClient, make_user, auth_headers) -> None:
        ann = make_user("ann")
        assert client.delete(f"{POSTS}/999", headers=auth_headers(ann)).status_code == 404


class TestLikeToggle:
    def test_like_then_unlike(self, client: TestClient, make_user, auth_headers) -> None:
        ann = make_user("ann")
        bob = make_user("bob")
        post = _create(client, auth_headers(ann))

        liked = client.post(f"{POSTS}/{post['id']}/like", headers=auth_headers(bob))
        assert liked.status_code == 200
        assert liked.json() == {
            "postId": post["id"],
            "state": "added",
            "likeCount": 1,
            "message": "Post liked",
        }

        unliked = client.post(f"{POSTS}/{post['id']}/like", headers=auth_headers(bob))
        assert unliked.json()["state"] == "removed"
        assert unliked.json()["likeCount"] == 0
        assert unliked.json()["message"] == "Like removed"

    def test_count_tracks_distinct_likers(self, client: TestClient, make_user, auth_headers) -> None:
        ann = make_user("ann")
        bob = make_user("bob")
        post = _create(client, auth_headers(ann))

        client.post(f"{POSTS}/{post['id']}/like", headers=auth_headers(ann))
        resp = client.post(f"{POSTS}/{post['id']}/like", headers=auth_headers(bob))
        assert resp.json()["likeCount"] == 2

    def test_unknown_post(self, client: TestClient, make_user, auth_headers) -> None:
        ann = make_user("ann")
        resp = client.post(f"{POSTS}/424242/like", headers=auth_headers(ann))
        assert resp.status_code == 404
        assert resp.json() == {"error": "Post not found"}

    def test_concurrent_insert_reported_as_added(self, db, make_user, monkeypatch) -> None:
        ann = make_user("ann")
        post_id = _seed_post(db, ann.id)
        ann_id = ann.id
        db.add(Like(user_id=ann_id, post_id=post_id))
        db.commit()

        # The first lookup misses the row another request just committed
        real_get_pair = type(crud_like).get_pair
        calls = []

        def stale_get_pair(self, session, **keys):
            calls.append(keys)
            if len(calls) == 1:
                return None
            return real_get_pair(self, session, **keys)

        monkeypatch.setattr(type(crud_like), "get_pair", stale_get_pair)

        state = crud_like.toggle(db, user_id=ann_id, post_id=post_id)
        assert state is ToggleState.ADDED
        assert crud_like.count_for_post(db, post_id=post_id) == 1
        assert len(calls) == 2

    def test_concurrent_delete_reported_as_removed(self, db, session_factory, make_user, monkeypatch, caplog) -> None:
        ann = make_user("ann")
        ann_id = ann.id
        post_id = _seed_post(db, ann_id)
        db.add(Like(user_id=ann_id, post_id=post_id))
        db.commit()

        # Another request removes the like between lookup and delete
        real_get_pair = type(crud_like).get_pair

        def racing_get_pair(self, session, **keys):
            found = real_get_pair(self, session, **keys)
            other = session_factory()
            try:
                other.query(Like).filter_by(**keys).delete()
                other.commit()
            finally:
                other.close()
            return found

        monkeypatch.setattr(type(crud_like), "get_pair", racing_get_pair)

        with caplog.at_level(logging.WARNING, logger="app.crud.base"):
            state = crud_like.toggle(db, user_id=ann_id, post_id=post_id)

        assert state is ToggleState.REMOVED
        assert crud_like.count_for_post(db, post_id=post_id) == 0
        assert "already removed by a concurrent request" in caplog.text

    def test_plain_unlike_logs_no_race(self, db, make_user, caplog) -> None:
        ann = make_user("ann")
        post_id = _seed_post(db, ann.id)
        crud_like.toggle(db, user_id=ann.id, post_id=post_id)

        with caplog.at_level(logging.WARNING, logger="app.crud.base"):
            assert crud_like.toggle(db, user_id=ann.id, post_id=post_id) is ToggleState.REMOVED
        assert "concurrent" not in caplog.text


PNG_BYTES = b"\x89PNG\r\n\x1a\n" + b"\x00" * 32


def _upload(client: TestClient, headers: dict) -> str:
    resp = client.post(
        "/api/v1/upload",
        files={"file": ("photo.png", PNG_BYTES, "image/png")},
        headers=headers,
    )
    assert resp.status_code == 200, resp.text
    return resp.json()["url"]


def _stored_path(url: str) -> Path:
    relative = url[len(settings.PUBLIC_BASE_URL.rstrip("/")) + len("/uploads/"):]
    return Path(settings.UPLOAD_DIR) / relative


class TestStoredImageCleanup:
    def test_deleting_a_copy_keeps_the_original_image(self, client: TestClient, make_user, auth_headers) -> None:
        ann = make_user("ann")
        bob = make_user("bob")
        url = _upload(client, auth_headers(ann))
        ann_post = _create(client, auth_headers(ann), imageUrl=url)
        bob_post = _create(client, auth_headers(bob), imageUrl=url)

        resp = client.delete(f"{POSTS}/{bob_post['id']}", headers=auth_headers(bob))
        assert resp.status_code == 200

        assert _stored_path(url).is_file()
        assert client.get(url[len(settings.PUBLIC_BASE_URL):]).status_code == 200
        remaining = client.get(POSTS, headers=auth_headers(ann)).json()
        assert [p["id"] for p in remaining] == [ann_post["id"]]

    def test_relative_path_copy_also_protects_the_image(self, client: TestClient, make_user, auth_headers) -> None:
        ann = make_user("ann")
        bob = make_user("bob")
        url = _upload(client, auth_headers(ann))
        _create(client, auth_headers(ann), imageUrl=url)
        bob_post = _create(client, auth_headers(bob), imageUrl=url[len(settings.PUBLIC_BASE_URL):])

        client.delete(f"{POSTS}/{bob_post['id']}", headers=auth_headers(bob))
        assert _stored_path(url).is_file()

    def test_image_used_as_profile_picture_is_kept(self, client: TestClient, make_user, auth_headers) -> None:
        ann = make_user("ann")
        url = _upload(client, auth_headers(ann))
        post = _create(client, auth_headers(ann), imageUrl=url)
        client.put("/api/v1/profile/update", json={"profileImage": url}, headers=auth_headers(ann))

        client.delete(f"{POSTS}/{post['id']}", headers=auth_headers(ann))
        assert _stored_path(url).is_file()

    def test_last_reference_removes_the_file(self, client: TestClient, make_user, auth_headers) -> None:
        ann = make_user("ann")
        url = _upload(client, auth_headers(ann))
        post = _create(client, auth_headers(ann), imageUrl=url)

        client.delete(f"{POSTS}/{post['id']}", headers=auth_headers(ann))
        assert not _stored_path(url).exists()


def _seed_post(db, user_id: int) -> int:
    post = Post(user_id=user_id, image_url="http://h/seed.jpg")
    db.add(post)
    db.commit()
    return post.id
