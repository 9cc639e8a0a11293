"""Video Routes — publish, watch (views + history), gated edits, listing.

Invariants:
    - Only the owner can edit, delete, or toggle publish; others get 404 and nothing changes
    - Each GET counts one view and moves the video to the end of the watch history
    - Unpublished videos are hidden from everyone but the owner
"""

from uuid import uuid4

from sqlalchemy import select

from vidtube.models.video import Video

VIDEO_FILE = ("clip.mp4", b"\x00\x00\x00\x18ftypmp42", "video/mp4")
THUMBNAIL = ("thumb.jpg", b"\xff\xd8\xff", "image/jpeg")


async def test_publish_video(client, make_user, blob_storage):
    alice, auth = await make_user("alice")
    res = await client.post(
        "/api/v1/videos", headers=auth,
        data={"title": " My trip ", "description": "Mountains"},
        files={"videoFile": VIDEO_FILE, "thumbnail": THUMBNAIL},
    )
    assert res.status_code == 201
    video = res.json()["data"]
    assert video["title"] == "My trip"
    assert video["ownerId"] == str(alice.id)
    assert video["duration"] == 42.5
    assert video["views"] == 0
    assert video["isPublished"] is True
    assert video["videoUrl"].startswith("https://cdn.vidtube.io/videoFile/")
    assert blob_storage.stored == ["videoFile", "thumbnail"]


async def test_publish_requires_thumbnail(client, make_user):
    _, auth = await make_user("alice")
    res = await client.post(
        "/api/v1/videos", headers=auth,
        data={"title": "t", "description": "d"},
        files={"videoFile": VIDEO_FILE},
    )
    assert res.status_code == 400
    assert res.json()["errors"][0]["fields"] == ["thumbnail"]


async def test_publish_duration_defaults_to_zero(client, make_user, blob_storage):
    _, auth = await make_user("alice")
    blob_storage.duration = None
    res = await client.post(
        "/api/v1/videos", headers=auth,
        data={"title": "t", "description": "d"},
        files={"videoFile": VIDEO_FILE, "thumbnail": THUMBNAIL},
    )
    assert res.json()["data"]["duration"] == 0


async def test_get_video_counts_views_and_projects_owner(client, make_user, make_video):
    alice, _ = await make_user("alice")
    _, bob_auth = await make_user("bob")
    video = await make_video(alice)

    first = await client.get(f"/api/v1/videos/{video.id}", headers=bob_auth)
    second = await client.get(f"/api/v1/videos/{video.id}", headers=bob_auth)

    assert first.status_code == 200
    assert first.json()["data"]["views"] == 1
    assert second.json()["data"]["views"] == 2
    assert second.json()["data"]["owner"] == {
        "fullName": "Alice",
        "username": "alice",
        "avatarUrl": "https://cdn.vidtube.io/avatar/alice",
    }


async def test_rewatch_moves_video_to_end_of_history(client, make_user, make_video):
    alice, auth = await make_user("alice")
    first = await make_video(alice, title="First")
    second = await make_video(alice, title="Second")

    for video in (first, second, first):
        await client.get(f"/api/v1/videos/{video.id}", headers=auth)

    res = await client.get("/api/v1/users/watchHistory", headers=auth)
    history = res.json()["data"]
    assert [v["title"] for v in history] == ["Second", "First"]
    assert history[0]["owner"]["username"] == "alice"


async def test_history_drops_deleted_videos(client, make_user, make_video):
    alice, auth = await make_user("alice")
    kept = await make_video(alice, title="Kept")
    gone = await make_video(alice, title="Gone")
    await client.get(f"/api/v1/videos/{kept.id}", headers=auth)
    await client.get(f"/api/v1/videos/{gone.id}", headers=auth)

    await client.delete(f"/api/v1/videos/{gone.id}", headers=auth)

    history = (await client.get("/api/v1/users/watchHistory", headers=auth)).json()["data"]
    assert [v["title"] for v in history] == ["Kept"]


async def test_get_unknown_video_is_404(client, make_user):
    _, auth = await make_user("alice")
    res = await client.get(f"/api/v1/videos/{uuid4()}", headers=auth)
    assert res.status_code == 404


async def test_non_owner_cannot_delete(client, make_user, make_video, test_db):
    alice, alice_auth = await make_user("alice")
    _, bob_auth = await make_user("bob")
    video = await make_video(alice)

    res = await client.delete(f"/api/v1/videos/{video.id}", headers=bob_auth)
    assert res.status_code == 404
    assert "not found or not authorized" in res.json()["message"]
    assert await test_db.scalar(select(Video.id).where(Video.id == video.id)) == video.id

    res = await client.delete(f"/api/v1/videos/{video.id}", headers=alice_auth)
    assert res.status_code == 200
    assert await test_db.scalar(select(Video.id).where(Video.id == video.id)) is None


async def test_update_video_by_owner_only(client, make_user, make_video, test_db):
    alice, alice_auth = await make_user("alice")
    _, bob_auth = await make_user("bob")
    video = await make_video(alice, title="Original")

    denied = await client.patch(
        f"/api/v1/videos/{video.id}", headers=bob_auth,
        data={"title": "Hijacked", "description": "x"},
    )
    assert denied.status_code == 404
    assert await test_db.scalar(
        select(Video.title).where(Video.id == video.id),
    ) == "Original"

    updated = await client.patch(
        f"/api/v1/videos/{video.id}", headers=alice_auth,
        data={"title": "Renamed", "description": "New text"},
        files={"thumbnail": THUMBNAIL},
    )
    assert updated.status_code == 200
    data = updated.json()["data"]
    assert data["title"] == "Renamed"
    assert data["thumbnailUrl"].startswith("https://cdn.vidtube.io/thumbnail/")


async def test_toggle_publish(client, make_user, make_video):
    alice, alice_auth = await make_user("alice")
    _, bob_auth = await make_user("bob")
    video = await make_video(alice)

    hidden = await client.patch(
        f"/api/v1/videos/toggle/publish/{video.id}", headers=alice_auth,
    )
    assert hidden.json()["data"]["isPublished"] is False

    assert (await client.get(f"/api/v1/videos/{video.id}", headers=bob_auth)).status_code == 404
    assert (await client.get(f"/api/v1/videos/{video.id}", headers=alice_auth)).status_code == 200

    denied = await client.patch(
        f"/api/v1/videos/toggle/publish/{video.id}", headers=bob_auth,
    )
    assert denied.status_code == 404

    shown = await client.patch(
        f"/api/v1/videos/toggle/publish/{video.id}", headers=alice_auth,
    )
    assert shown.json()["data"]["isPublished"] is True


# ─── Listing ─────────────────────────────────────────────────────

async def test_list_videos_sorts_and_paginates(client, make_user, make_video):
    alice, _ = await make_user("alice")
    _, bob_auth = await make_user("bob")
    for title, views in [("Alpha", 5), ("Bravo", 50), ("Charlie", 20)]:
        await make_video(alice, title=title, views=views)

    res = await client.get(
        "/api/v1/videos", headers=bob_auth,
        params={"userId": str(alice.id), "sortBy": "views", "sortType": "desc",
                "page": 1, "limit": 2},
    )
    assert res.status_code == 200
    page = res.json()["data"]
    assert [v["title"] for v in page["items"]] == ["Bravo", "Charlie"]
    assert page["pagination"] == {"page": 1, "limit": 2, "total": 3}

    second = await client.get(
        "/api/v1/videos", headers=bob_auth,
        params={"userId": str(alice.id), "sortBy": "views", "sortType": "desc",
                "page": 2, "limit": 2},
    )
    assert [v["title"] for v in second.json()["data"]["items"]] == ["Alpha"]


async def test_list_videos_title_search_escapes_wildcards(client, make_user, make_video):
    alice, auth = await make_user("alice")
    await make_video(alice, title="100% Pure")
    await make_video(alice, title="1000 Pure")

    res = await client.get(
        "/api/v1/videos", headers=auth,
        params={"userId": str(alice.id), "query": "100%"},
    )
    assert [v["title"] for v in res.json()["data"]["items"]] == ["100% Pure"]

    ci = await client.get(
        "/api/v1/videos", headers=auth, params={"userId": str(alice.id), "query": "pure"},
    )
    assert ci.json()["data"]["pagination"]["total"] == 2


async def test_list_hides_unpublished_from_others(client, make_user, make_video):
    alice, alice_auth = await make_user("alice")
    _, bob_auth = await make_user("bob")
    await make_video(alice, title="Public")
    await make_video(alice, title="Draft", is_published=False)

    params = {"userId": str(alice.id), "sortBy": "title", "sortType": "asc"}
    theirs = await client.get("/api/v1/videos", headers=bob_auth, params=params)
    mine = await client.get("/api/v1/videos", headers=alice_auth, params=params)
    assert [v["title"] for v in theirs.json()["data"]["items"]] == ["Public"]
    assert [v["title"] for v in mine.json()["data"]["items"]] == ["Draft", "Public"]


async def test_list_videos_rejects_unknown_sort(client, make_user):
    alice, auth = await make_user("alice")
    res = await client.get(
        "/api/v1/videos", headers=auth,
        params={"userId": str(alice.id), "sortBy": "owner_id"},
    )
    assert res.status_code == 400


async def test_list_videos_unknown_owner(client, make_user):
    _, auth = await make_user("alice")
    res = await client.get("/api/v1/videos", headers=auth, params={"userId": str(uuid4())})
    assert res.status_code == 404


# ─── Input limits and visibility ─────────────────────────────────

async def test_publish_rejects_overlong_title(client, make_user, blob_storage, test_db):
    _, auth = await make_user("alice")
    res = await client.post(
        "/api/v1/videos", headers=auth,
        data={"title": "t" * 201, "description": "d"},
        files={"videoFile": VIDEO_FILE, "thumbnail": THUMBNAIL},
    )
    assert res.status_code == 400
    assert res.json()["errors"][0]["fields"] == ["title"]
    assert blob_storage.stored == []
    assert await test_db.scalar(select(Video.id)) is None


async def test_update_rejects_overlong_title(client, make_user, make_video, test_db):
    alice, auth = await make_user("alice")
    video = await make_video(alice, title="Original")
    res = await client.patch(
        f"/api/v1/videos/{video.id}", headers=auth,
        data={"title": "t" * 201, "description": "d"},
    )
    assert res.status_code == 400
    assert await test_db.scalar(
        select(Video.title).where(Video.id == video.id),
    ) == "Original"


async def test_history_hides_videos_unpublished_by_others(client, make_user, make_video):
    alice, alice_auth = await make_user("alice")
    _, bob_auth = await make_user("bob")
    theirs = await make_video(alice, title="Theirs")
    own = await make_video(alice, title="Own draft")

    await client.get(f"/api/v1/videos/{theirs.id}", headers=bob_auth)
    await client.get(f"/api/v1/videos/{own.id}", headers=alice_auth)
    for video in (theirs, own):
        await client.patch(f"/api/v1/videos/toggle/publish/{video.id}", headers=alice_auth)

    bob_history = (await client.get("/api/v1/users/watchHistory", headers=bob_auth)).json()
    assert bob_history["data"] == []
    alice_history = (await client.get("/api/v1/users/watchHistory", headers=alice_auth)).json()
    assert [v["title"] for v in alice_history["data"]] == ["Own draft"]
