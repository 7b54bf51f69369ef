"""
PerkBoard Backend - Post Service Unit Tests
=============================================

What we test:
    ✅ Save: adds to the viewer's list and increments post.saves and
       author.save_count in SQL (col = col + 1), not in Python
    ✅ Concurrent saves each issue their own relative increment
    ✅ Save twice / unsave unsaved: no-op with an explanatory message
    ✅ Unsave: decrements clamped at zero with GREATEST(col - 1, 0)
    ✅ Unknown post → NotFoundError
    ✅ Create: stores the post and increments the author's post_count
    ✅ Listing annotates is_saved per viewer
"""

import asyncio
from datetime import datetime, timezone
from unittest.mock import MagicMock
from uuid import uuid4

import pytest
from sqlalchemy.dialects import postgresql
from sqlalchemy.exc import SQLAlchemyError

from app.exceptions import DatabaseError, NotFoundError
from app.models.post import Post
from app.models.user import User
from app.schemas.post import PostCreate
from app.services.post_service import counter_update, post_service


def _executed_updates(db):
    """(table, sql, params) for every statement passed to db.execute()."""
    updates = []
    for call in db.execute.call_args_list:
        stmt = call.args[0]
        compiled = stmt.compile(dialect=postgresql.dialect())
        updates.append((stmt.table.name, str(compiled), compiled.params))
    return updates


@pytest.fixture
def saved_setup(mock_db_session, make_user, make_post):
    """A viewer, a post and its author; mock_db_session.get() finds the post."""
    author = make_user(username="author")
    post = make_post(name="Gen rush", author_id=author.id)
    viewer = make_user(username="viewer")

    def _get(model, key):
        if model is Post and key == post.id:
            return post
        return None

    mock_db_session.get.side_effect = _get
    return viewer, post, author


class TestCounterUpdate:

    def test_increment(self):
        post_id = uuid4()
        compiled = counter_update(Post, post_id, Post.saves, 1).compile(dialect=postgresql.dialect())

        assert "UPDATE posts SET saves=" in str(compiled)
        assert "posts.saves +" in str(compiled)
        assert "greatest" not in str(compiled).lower()
        assert compiled.params["id_1"] == post_id

    def test_decrement_is_clamped(self):
        compiled = counter_update(User, uuid4(), User.followers, -1).compile(dialect=postgresql.dialect())

        assert "greatest(users.followers +" in str(compiled)
        assert -1 in compiled.params.values()


class TestSavePost:

    @pytest.mark.asyncio
    async def test_save(self, mock_db_session, saved_setup):
        viewer, post, author = saved_setup

        message = await post_service.save_post(mock_db_session, viewer, post.id)

        assert message == "saved"
        assert viewer.saved_post_ids == [post.id]
        posts_update, users_update = _executed_updates(mock_db_session)
        assert posts_update[0] == "posts"
        assert "posts.saves +" in posts_update[1]
        assert posts_update[2]["id_1"] == post.id
        assert users_update[0] == "users"
        assert "users.save_count +" in users_update[1]
        assert users_update[2]["id_1"] == author.id
        # The in-memory row is never used to compute the new value
        assert post.saves == 0
        mock_db_session.flush.assert_awaited_once()

    @pytest.mark.asyncio
    async def test_concurrent_saves_each_increment(self, mock_db_session, saved_setup, make_user):
        _, post, _ = saved_setup
        first, second = make_user(), make_user()

        results = await asyncio.gather(
            post_service.save_post(mock_db_session, first, post.id),
            post_service.save_post(mock_db_session, second, post.id),
        )

        assert results == ["saved", "saved"]
        post_updates = [u for u in _executed_updates(mock_db_session) if u[0] == "posts"]
        assert len(post_updates) == 2
        for _, sql, params in post_updates:
            assert "posts.saves +" in sql
            assert 1 in params.values()

    @pytest.mark.asyncio
    async def test_already_saved(self, mock_db_session, saved_setup):
        viewer, post, _ = saved_setup
        viewer.saved_post_ids = [post.id]

        message = await post_service.save_post(mock_db_session, viewer, post.id)

        assert message == "already was saved"
        mock_db_session.execute.assert_not_called()
        mock_db_session.flush.assert_not_called()

    @pytest.mark.asyncio
    async def test_unknown_post(self, mock_db_session, saved_setup):
        viewer, _, _ = saved_setup

        with pytest.raises(NotFoundError):
            await post_service.save_post(mock_db_session, viewer, uuid4())

    @pytest.mark.asyncio
    async def test_database_error(self, mock_db_session, saved_setup):
        viewer, post, _ = saved_setup
        mock_db_session.flush.side_effect = SQLAlchemyError("deadlock")

        with pytest.raises(DatabaseError):
            await post_service.save_post(mock_db_session, viewer, post.id)


class TestUnsavePost:

    @pytest.mark.asyncio
    async def test_unsave(self, mock_db_session, saved_setup):
        viewer, post, author = saved_setup
        other = uuid4()
        viewer.saved_post_ids = [other, post.id]

        message = await post_service.unsave_post(mock_db_session, viewer, post.id)

        assert message == "unsaved"
        assert viewer.saved_post_ids == [other]
        posts_update, users_update = _executed_updates(mock_db_session)
        assert "greatest(posts.saves +" in posts_update[1]
        assert -1 in posts_update[2].values()
        assert "greatest(users.save_count +" in users_update[1]
        assert users_update[2]["id_1"] == author.id

    @pytest.mark.asyncio
    async def test_not_saved(self, mock_db_session, saved_setup):
        viewer, post, _ = saved_setup

        message = await post_service.unsave_post(mock_db_session, viewer, post.id)

        assert message == "not a saved post"
        mock_db_session.execute.assert_not_called()
        mock_db_session.flush.assert_not_called()


class TestCreatePost:

    @pytest.mark.asyncio
    async def test_create(self, mock_db_session, make_user):
        author = make_user(post_count=2)
        perk_id = uuid4()

        async def _assign_defaults():
            added = mock_db_session.add.call_args.args[0]
            added.id = uuid4()
            added.created_at = datetime.now(timezone.utc)

        mock_db_session.flush.side_effect = _assign_defaults
        data = PostCreate(name="Gen rush", description="Fast gens", perk_ids=[perk_id], type="survivor")

        result = await post_service.create_post(mock_db_session, author, data)

        added = mock_db_session.add.call_args.args[0]
        assert isinstance(added, Post)
        assert added.author_id == author.id
        assert result.perk_ids == [perk_id]
        assert result.saves == 0
        assert result.is_saved is False
        [(table, sql, params)] = _executed_updates(mock_db_session)
        assert table == "users"
        assert "users.post_count +" in sql
        assert params["id_1"] == author.id


class TestListing:

    @pytest.mark.asyncio
    async def test_list_posts_marks_saved(self, mock_db_session, make_post, make_user):
        first, second = make_post(name="a"), make_post(name="b")
        result = MagicMock()
        result.scalars.return_value.all.return_value = [first, second]
        mock_db_session.execute.return_value = result
        viewer = make_user(saved_post_ids=[second.id])

        posts = await post_service.list_posts(mock_db_session, viewer)

        assert [(p.name, p.is_saved) for p in posts] == [("a", False), ("b", True)]

    @pytest.mark.asyncio
    async def test_get_post_missing(self, mock_db_session):
        with pytest.raises(NotFoundError):
            await post_service.get_post(mock_db_session, uuid4(), None)
