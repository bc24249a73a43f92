"""Tests for the chatroom REST endpoints."""
import pytest

YOUTUBE_URL = "https://www.youtube.com/watch?v=dQw4w9WgXcQ"


def _create_room(client, **overrides):
    body = {
        "topic": "Movie Night",
        "description": "Friday films",
        "mediaUrl": YOUTUBE_URL,
        "mediaType": "youtube",
        "category": "Entertainment",
    }
    body.update(overrides)
    return client.post("/chatrooms", json=body)


def _send(client, room_id, content="hi", sender="Alice", sender_id="u1", **extra):
    body = {"content": content, "sender": sender, "senderId": sender_id}
    body.update(extra)
    return client.post(f"/chatrooms/{room_id}/messages", json=body)


class TestChatroomEndpoints:

    def test_health(self, api_client):
        assert api_client.get("/health").json() == {"status": "ok"}

    def test_create_and_get(self, api_client):
        response = _create_room(api_client)
        assert response.status_code == 201
        room_id = response.json()["id"]

        data = api_client.get(f"/chatrooms/{room_id}").json()
        assert data["topic"] == "Movie Night"
        assert data["messageCount"] == 1
        assert data["isLive"] is False
        assert data["activeUserCount"] == 0

    def test_create_invalid(self, api_client):
        response = _create_room(api_client, mediaUrl="https://vimeo.com/1")
        assert response.status_code == 400
        assert "media" in response.json()["detail"].lower()

    def test_create_mixed_case_media_type(self, api_client):
        response = _create_room(
            api_client, mediaUrl="https://youtu.be/abc123", mediaType="YouTube",
        )
        assert response.status_code == 201
        room_id = response.json()["id"]

        assert api_client.get(f"/chatrooms/{room_id}").json()["mediaType"] == "youtube"
        seed_id = api_client.get(f"/chatrooms/{room_id}/messages").json()[0]["id"]
        preview = api_client.get(f"/chatrooms/{room_id}/messages/{seed_id}/preview").json()
        assert preview["mediaThumbnail"] == "https://img.youtube.com/vi/abc123/default.jpg"

    def test_create_unknown_media_type(self, api_client):
        response = _create_room(api_client, mediaType="video")
        assert response.status_code == 422
        assert api_client.get("/chatrooms").json() == []

    def test_get_missing_room(self, api_client):
        assert api_client.get("/chatrooms/77").status_code == 404

    def test_list_search_and_filter(self, api_client):
        _create_room(api_client)
        _create_room(api_client, topic="Chess", description="Openings", category="Games")

        assert len(api_client.get("/chatrooms").json()) == 2
        found = api_client.get("/chatrooms", params={"search": "MOVIE"}).json()
        assert [r["topic"] for r in found] == ["Movie Night"]
        filtered = api_client.get("/chatrooms", params={"category": "games"}).json()
        assert [r["topic"] for r in filtered] == ["Chess"]
        assert len(api_client.get("/chatrooms", params={"search": "  "}).json()) == 2

    def test_views_make_room_live(self, api_client):
        room_id = _create_room(api_client).json()["id"]
        response = api_client.post(f"/chatrooms/{room_id}/views", json={"identity": "u3"})
        assert response.status_code == 204
        data = api_client.get(f"/chatrooms/{room_id}").json()
        assert data["viewCount"] == 1
        assert data["isLive"] is True

    def test_view_missing_room(self, api_client):
        response = api_client.post("/chatrooms/5/views", json={"identity": "u3"})
        assert response.status_code == 404


class TestMessageEndpoints:

    def test_send_and_list(self, api_client):
        room_id = _create_room(api_client).json()["id"]
        response = _send(api_client, room_id)
        assert response.status_code == 201
        sent = response.json()

        messages = api_client.get(f"/chatrooms/{room_id}/messages").json()
        assert [m["content"] for m in messages] == ["Friday films", "hi"]
        assert messages[1]["id"] == sent["id"]

    def test_send_empty_content(self, api_client):
        room_id = _create_room(api_client).json()["id"]
        assert _send(api_client, room_id, content="").status_code == 400

    def test_send_missing_room(self, api_client):
        assert _send(api_client, 42).status_code == 404

    def test_full_view_replies_and_preview(self, api_client):
        room_id = _create_room(api_client).json()["id"]
        parent = _send(api_client, room_id, content="parent").json()
        child = _send(
            api_client, room_id, content="child", sender_id="u2",
            replyToMessageId=parent["id"],
        ).json()
        api_client.post(
            f"/messages/{parent['id']}/reactions", json={"emoji": "👍", "identity": "u2"},
        )

        full = api_client.get(f"/chatrooms/{room_id}/messages/full").json()
        assert full[1]["reactions"] == [{"emoji": "👍", "count": 1, "reactedByMe": False}]
        assert full[2]["replyToMessageId"] == parent["id"]

        replies = api_client.get(
            f"/chatrooms/{room_id}/messages/{parent['id']}/replies"
        ).json()
        assert [r["id"] for r in replies] == [child["id"]]

        preview = api_client.get(
            f"/chatrooms/{room_id}/messages/{parent['id']}/preview"
        ).json()
        assert preview == {"sender": "Alice", "contentSnippet": "parent", "mediaThumbnail": None}

    def test_preview_missing(self, api_client):
        room_id = _create_room(api_client).json()["id"]
        assert api_client.get(f"/chatrooms/{room_id}/messages/99/preview").status_code == 404


class TestPinEndpoints:

    def test_pin_cycle(self, api_client):
        room_id = _create_room(api_client).json()["id"]
        assert api_client.get(f"/chatrooms/{room_id}/pin").json() == {"messageId": None}

        response = api_client.put(f"/chatrooms/{room_id}/pin", json={"messageId": 0})
        assert response.json() == {"messageId": 0}
        assert api_client.get(f"/chatrooms/{room_id}").json()["pinnedMessageId"] == 0

        api_client.delete(f"/chatrooms/{room_id}/pin")
        assert api_client.get(f"/chatrooms/{room_id}/pin").json() == {"messageId": None}

    def test_pin_missing_room(self, api_client):
        assert api_client.put("/chatrooms/9/pin", json={"messageId": 0}).status_code == 404


class TestReactionEndpoints:

    def test_add_is_idempotent_and_remove(self, api_client):
        body = {"emoji": "🔥", "identity": "u1"}
        api_client.post("/messages/3/reactions", json=body)
        response = api_client.post("/messages/3/reactions", json=body)
        assert response.json() == [{"emoji": "🔥", "count": 1, "reactedByMe": True}]

        response = api_client.delete(
            "/messages/3/reactions", params={"emoji": "🔥", "identity": "u1"},
        )
        assert response.json() == []
        assert api_client.get("/messages/3/reactions").json() == []

    def test_reacted_by_me_for_caller(self, api_client):
        api_client.post("/messages/0/reactions", json={"emoji": "x", "identity": "u1"})
        api_client.post("/messages/0/reactions", json={"emoji": "x", "identity": "u2"})

        mine = api_client.get("/messages/0/reactions", params={"identity": "u1"}).json()
        assert mine == [{"emoji": "x", "count": 2, "reactedByMe": True}]
        other = api_client.get("/messages/0/reactions", params={"identity": "u3"}).json()
        assert other == [{"emoji": "x", "count": 2, "reactedByMe": False}]
        anonymous = api_client.get("/messages/0/reactions").json()
        assert anonymous == [{"emoji": "x", "count": 2, "reactedByMe": False}]

    def test_full_messages_flag_callers_reactions(self, api_client):
        room_id = _create_room(api_client).json()["id"]
        seed_id = api_client.get(f"/chatrooms/{room_id}/messages").json()[0]["id"]
        api_client.post(
            f"/messages/{seed_id}/reactions", json={"emoji": "🔥", "identity": "u1"},
        )

        full = api_client.get(
            f"/chatrooms/{room_id}/messages/full", params={"identity": "u1"},
        ).json()
        assert full[0]["reactions"] == [{"emoji": "🔥", "count": 1, "reactedByMe": True}]


class TestIdentityEndpoints:

    def test_username_rewrite(self, api_client):
        room_id = _create_room(api_client).json()["id"]
        _send(api_client, room_id, sender="Alice", sender_id="u1")

        response = api_client.put("/identities/u1/username", json={"username": "Bob"})
        assert response.json() == {"identity": "u1", "updated": 1}
        messages = api_client.get(f"/chatrooms/{room_id}/messages").json()
        assert messages[-1]["sender"] == "Bob"

    def test_blank_username(self, api_client):
        response = api_client.put("/identities/u1/username", json={"username": " "})
        assert response.status_code == 400

    def test_avatar_rewrite(self, api_client):
        room_id = _create_room(api_client).json()["id"]
        _send(api_client, room_id, sender_id="u1", avatarUrl="https://a/old.png")

        api_client.put("/identities/u1/avatar", json={"avatarUrl": None})
        messages = api_client.get(f"/chatrooms/{room_id}/messages").json()
        assert messages[-1]["avatarUrl"] is None


class TestAdminEndpoints:

    @pytest.mark.parametrize("caller,status", [("admin-1", 200), ("u1", 403)])
    def test_cleanup_requires_admin(self, api_client, caller, status):
        response = api_client.post(
            "/admin/presence/cleanup", headers={"X-Caller-Id": caller},
        )
        assert response.status_code == status

    def test_cleanup_reports_removed(self, api_client, clock):
        room_id = _create_room(api_client).json()["id"]
        api_client.post(f"/chatrooms/{room_id}/views", json={"identity": "u3"})
        clock.advance(61)
        response = api_client.post(
            "/admin/presence/cleanup", headers={"X-Caller-Id": "admin-1"},
        )
        assert response.json() == {"removed": 1}

    def test_cleanup_without_caller(self, api_client):
        assert api_client.post("/admin/presence/cleanup").status_code == 422
