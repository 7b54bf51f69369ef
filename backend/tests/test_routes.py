"""
PerkBoard Backend - Route Tests
=================================

What we test:
    ✅ Greeting and JSON error envelope
    ✅ Search routes delegate to SearchService with the viewer
    ✅ Session-protected routes reject anonymous callers (401)
    ✅ Admin routes: 401 anonymous, 403 non-admin, 200 admin
    ✅ Unreadable definition file → generic 500, no internals leaked
    ✅ Sign-in requires the identity broker key and sets the session cookie

Services are patched where the route module imports them; the database
session and viewer come from conftest overrides.
"""

from unittest.mock import AsyncMock, patch
from uuid import uuid4

import pytest

from app.exceptions import InputReadError, NotFoundError
from app.schemas.perk import PerkDefinition

BROKER_HEADERS = {"X-Identity-Broker-Key": "test-broker-key"}
IDENTITY = {"provider": "steam", "provider_user_id": "76561198000000000", "username": "entity"}


@pytest.mark.asyncio
async def test_root_greeting(test_client):
    response = await test_client.get("/")

    assert response.status_code == 200
    assert response.text == "Hello world :)"


class TestPostRoutes:

    @pytest.mark.asyncio
    async def test_search_posts_passes_query_and_viewer(self, test_client, mock_db_session, make_user, as_viewer):
        viewer = make_user()
        as_viewer(viewer)
        search = AsyncMock(return_value=[])

        with patch("app.routes.posts.search_service.search_posts", new=search):
            response = await test_client.get("/api/searchPosts", params={"query": "dead hard"})

        assert response.status_code == 200
        assert response.json() == []
        search.assert_awaited_once_with(mock_db_session, "dead hard", viewer)

    @pytest.mark.asyncio
    async def test_search_posts_without_query(self, test_client):
        response = await test_client.get("/api/searchPosts")

        assert response.status_code == 200
        assert response.json() == []

    @pytest.mark.asyncio
    async def test_savepost_requires_session(self, test_client):
        response = await test_client.post("/api/savepost", json={"post_id": str(uuid4())})

        assert response.status_code == 401
        assert response.json()["error"] == "not_authenticated"

    @pytest.mark.asyncio
    async def test_savepost_message(self, test_client, make_user, as_viewer):
        as_viewer(make_user())

        with patch("app.routes.posts.post_service.save_post", new=AsyncMock(return_value="saved")):
            response = await test_client.post("/api/savepost", json={"post_id": str(uuid4())})

        assert response.status_code == 201
        assert response.json() == {"message": "saved"}

    @pytest.mark.asyncio
    async def test_missing_post_is_404(self, test_client):
        post_id = uuid4()
        failure = NotFoundError(resource="post", resource_id=str(post_id))

        with patch("app.routes.posts.post_service.get_post", new=AsyncMock(side_effect=failure)):
            response = await test_client.get(f"/api/posts/{post_id}")

        assert response.status_code == 404
        assert response.json()["error"] == "not_found"

    @pytest.mark.asyncio
    async def test_newpost_requires_session(self, test_client):
        body = {"name": "Gen rush", "type": "survivor"}
        response = await test_client.post("/api/newpost", json=body)

        assert response.status_code == 401


class TestPerkDefinitionRoute:

    @pytest.mark.asyncio
    async def test_anonymous(self, test_client):
        response = await test_client.get("/api/perkDefs")
        assert response.status_code == 401

    @pytest.mark.asyncio
    async def test_non_admin(self, test_client, make_user, as_viewer):
        as_viewer(make_user(is_admin=False))

        response = await test_client.get("/api/perkDefs")

        assert response.status_code == 403
        assert response.json()["error"] == "forbidden"

    @pytest.mark.asyncio
    async def test_admin(self, test_client, make_user, as_viewer):
        as_viewer(make_user(is_admin=True))
        records = [PerkDefinition(name="Bond", description="See auras.", owner="Dwight", role="Survivor")]

        with patch("app.routes.perks.perk_service.load_definitions", new=AsyncMock(return_value=records)):
            response = await test_client.get("/api/perkDefs")

        assert response.status_code == 200
        assert response.json() == [
            {"name": "Bond", "description": "See auras.", "owner": "Dwight", "role": "Survivor", "img_url": None}
        ]

    @pytest.mark.asyncio
    async def test_unreadable_file(self, test_client, make_user, as_viewer):
        as_viewer(make_user(is_admin=True))
        failure = InputReadError(
            message="Could not read the perk definition file.",
            context={"path": "/secret/perks.txt"},
        )

        with patch("app.routes.perks.perk_service.load_definitions", new=AsyncMock(side_effect=failure)):
            response = await test_client.get("/api/perkDefs")

        assert response.status_code == 500
        body = response.json()
        assert body["error"] == "server_error"
        assert "/secret" not in response.text

    @pytest.mark.asyncio
    async def test_update_perks_admin(self, test_client, make_user, as_viewer):
        from app.schemas.perk import PerkUpdateResult

        as_viewer(make_user(is_admin=True))
        body = {"perks": [{"name": "Bond", "description": "d", "owner": "Dwight", "role": "Survivor"}]}

        with patch("app.routes.perks.perk_service.update_perks",
                   new=AsyncMock(return_value=PerkUpdateResult(created=1, updated=0))):
            response = await test_client.post("/api/updatePerks", json=body)

        assert response.status_code == 200
        assert response.json() == {"created": 1, "updated": 0}


class TestAuthRoutes:

    @pytest.mark.asyncio
    async def test_session_without_broker_key(self, test_client):
        response = await test_client.post("/auth/session", json=IDENTITY)
        assert response.status_code == 401

    @pytest.mark.asyncio
    async def test_session_with_wrong_key(self, test_client):
        response = await test_client.post(
            "/auth/session", json=IDENTITY, headers={"X-Identity-Broker-Key": "guess"}
        )
        assert response.status_code == 401

    @pytest.mark.asyncio
    async def test_session_sets_cookie(self, test_client, make_user):
        user = make_user(username="entity")

        with patch("app.routes.auth.user_service.sign_in", new=AsyncMock(return_value=user)):
            response = await test_client.post("/auth/session", json=IDENTITY, headers=BROKER_HEADERS)

        assert response.status_code == 200
        assert response.json()["id"] == str(user.id)
        assert "perkboard_session" in response.headers.get("set-cookie", "")

    @pytest.mark.asyncio
    async def test_logout_when_signed_out(self, test_client):
        response = await test_client.get("/auth/logout")

        assert response.status_code == 200
        assert response.text == "Not signed in"

    @pytest.mark.asyncio
    async def test_getuser_anonymous(self, test_client):
        response = await test_client.get("/api/getuser")

        assert response.status_code == 200
        assert response.json() is None
