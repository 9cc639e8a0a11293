"""Comments, Tweets, Playlists — author-only edits and playlist set semantics.

Invariants:
    - Non-authors get 404 on edit/delete and the row is unchanged
    - A video appears in a playlist at most once, in the order it was added
"""

from uuid import uuid4

from sqlalchemy import func, select

from vidtube.models.comment import Comment
from vidtube.models.playlist import PlaylistVideo
from vidtube.models.tweet import Tweet


# ─── Comments ────────────────────────────────────────────────────

async def test_add_and_list_comments(client, make_user, make_video):
    alice, auth = await make_user("alice")
    video = await make_video(alice)

    for text in ("first!", "second", "third"):
        res = await client.post(
            f"/api/v1/comments/{video.id}", headers=auth, json={"content": text},
        )
        assert res.status_code == 201

    page = (await client.get(
        f"/api/v1/comments/{video.id}", headers=auth, params={"page": 1, "limit": 2},
    )).json()["data"]
    assert [c["content"] for c in page["items"]] == ["third", "second"]
    assert page["pagination"]["total"] == 3
    assert page["items"][0]["ownerId"] == str(alice.id)


async def test_comment_on_missing_video(client, make_user):
    _, auth = await make_user("alice")
    res = await client.post(
        f"/api/v1/comments/{uuid4()}", headers=auth, json={"content": "hello"},
    )
    assert res.status_code == 404


async def test_blank_comment_rejected(client, make_user, make_video):
    alice, auth = await make_user("alice")
    video = await make_video(alice)
    res = await client.post(
        f"/api/v1/comments/{video.id}", headers=auth, json={"content": "   "},
    )
    assert res.status_code == 400


async def test_comment_edit_and_delete_by_author_only(
    client, make_user, make_video, make_comment, test_db,
):
    alice, alice_auth = await make_user("alice")
    _, bob_auth = await make_user("bob")
    video = await make_video(alice)
    comment = await make_comment(alice, video, content="original")

    denied = await client.patch(
        f"/api/v1/comments/c/{comment.id}", headers=bob_auth, json={"content": "spam"},
    )
    assert denied.status_code == 404
    assert await test_db.scalar(
        select(Comment.content).where(Comment.id == comment.id),
    ) == "original"

    edited = await client.patch(
        f"/api/v1/comments/c/{comment.id}", headers=alice_auth, json={"content": "edited"},
    )
    assert edited.json()["data"]["content"] == "edited"

    assert (await client.delete(
        f"/api/v1/comments/c/{comment.id}", headers=bob_auth,
    )).status_code == 404
    assert (await client.delete(
        f"/api/v1/comments/c/{comment.id}", headers=alice_auth,
    )).status_code == 200
    assert await test_db.scalar(select(func.count(Comment.id))) == 0


# ─── Tweets ──────────────────────────────────────────────────────

async def test_tweet_lifecycle(client, make_user, test_db):
    alice, alice_auth = await make_user("alice")
    _, bob_auth = await make_user("bob")

    created = await client.post(
        "/api/v1/tweets", headers=alice_auth, json={"content": "  hello world "},
    )
    assert created.status_code == 201
    tweet = created.json()["data"]
    assert tweet["content"] == "hello world"

    listed = await client.get(f"/api/v1/tweets/user/{alice.id}", headers=bob_auth)
    assert [t["id"] for t in listed.json()["data"]] == [tweet["id"]]

    denied = await client.patch(
        f"/api/v1/tweets/{tweet['id']}", headers=bob_auth, json={"content": "mine now"},
    )
    assert denied.status_code == 404

    edited = await client.patch(
        f"/api/v1/tweets/{tweet['id']}", headers=alice_auth, json={"content": "edited"},
    )
    assert edited.json()["data"]["content"] == "edited"

    assert (await client.delete(
        f"/api/v1/tweets/{tweet['id']}", headers=alice_auth,
    )).status_code == 200
    assert await test_db.scalar(select(func.count(Tweet.id))) == 0


async def test_tweets_of_unknown_user(client, make_user):
    _, auth = await make_user("alice")
    res = await client.get(f"/api/v1/tweets/user/{uuid4()}", headers=auth)
    assert res.status_code == 404


# ─── Playlists ───────────────────────────────────────────────────

async def _create_playlist(client, auth, name="Favourites"):
    res = await client.post(
        "/api/v1/playlists", headers=auth, json={"name": name, "desc": "Best of"},
    )
    assert res.status_code == 201
    return res.json()["data"]


async def test_playlist_add_is_idempotent_and_ordered(client, make_user, make_video, test_db):
    alice, auth = await make_user("alice")
    first = await make_video(alice, title="First")
    second = await make_video(alice, title="Second")
    playlist = await _create_playlist(client, auth)
    assert playlist["videos"] == []

    for video in (first, second, first):
        res = await client.patch(
            f"/api/v1/playlists/add/{video.id}/{playlist['id']}", headers=auth,
        )
        assert res.status_code == 200

    assert res.json()["data"]["videos"] == [str(first.id), str(second.id)]
    assert await test_db.scalar(select(func.count()).select_from(PlaylistVideo)) == 2

    removed = await client.patch(
        f"/api/v1/playlists/remove/{first.id}/{playlist['id']}", headers=auth,
    )
    assert removed.json()["data"]["videos"] == [str(second.id)]

    again = await client.patch(
        f"/api/v1/playlists/remove/{first.id}/{playlist['id']}", headers=auth,
    )
    assert again.status_code == 200
    assert again.json()["data"]["videos"] == [str(second.id)]


async def test_playlist_membership_owner_only(client, make_user, make_video, test_db):
    alice, alice_auth = await make_user("alice")
    bob, bob_auth = await make_user("bob")
    video = await make_video(bob)
    playlist = await _create_playlist(client, alice_auth)

    res = await client.patch(
        f"/api/v1/playlists/add/{video.id}/{playlist['id']}", headers=bob_auth,
    )
    assert res.status_code == 404
    assert await test_db.scalar(select(func.count()).select_from(PlaylistVideo)) == 0


async def test_playlist_add_missing_video(client, make_user):
    _, auth = await make_user("alice")
    playlist = await _create_playlist(client, auth)
    res = await client.patch(
        f"/api/v1/playlists/add/{uuid4()}/{playlist['id']}", headers=auth,
    )
    assert res.status_code == 404


async def test_playlist_crud(client, make_user):
    alice, alice_auth = await make_user("alice")
    _, bob_auth = await make_user("bob")
    playlist = await _create_playlist(client, alice_auth, name="Road trip")

    fetched = await client.get(f"/api/v1/playlists/{playlist['id']}", headers=bob_auth)
    assert fetched.json()["data"]["name"] == "Road trip"

    listed = await client.get(f"/api/v1/playlists/user/{alice.id}", headers=bob_auth)
    assert [p["id"] for p in listed.json()["data"]] == [playlist["id"]]

    denied = await client.patch(
        f"/api/v1/playlists/{playlist['id']}", headers=bob_auth,
        json={"name": "Mine", "desc": "now"},
    )
    assert denied.status_code == 404

    renamed = await client.patch(
        f"/api/v1/playlists/{playlist['id']}", headers=alice_auth,
        json={"name": "Long drive", "desc": "Updated"},
    )
    assert renamed.json()["data"]["name"] == "Long drive"

    assert (await client.delete(
        f"/api/v1/playlists/{playlist['id']}", headers=bob_auth,
    )).status_code == 404
    assert (await client.delete(
        f"/api/v1/playlists/{playlist['id']}", headers=alice_auth,
    )).status_code == 200
    gone = await client.get(f"/api/v1/playlists/{playlist['id']}", headers=alice_auth)
    assert gone.status_code == 404
