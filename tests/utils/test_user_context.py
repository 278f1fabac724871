"""Tests for utils/user_context.py - acting admin propagation via contextvars."""

from uuid import uuid4

import pytest

from utils.user_context import (
    get_current_user_id,
    peek_current_user_id,
    set_current_user_id,
    clear_current_user_id,
    user_context,
)


class TestGetCurrentUserId:

    def test_raises_without_context(self):
        """Catalog edits outside a user context are refused."""
        with pytest.raises(RuntimeError, match="No user context"):
            get_current_user_id()


class TestPeekCurrentUserId:

    def test_none_for_anonymous_reads(self):
        assert peek_current_user_id() is None

    def test_returns_acting_user(self):
        user_id = uuid4()
        set_current_user_id(user_id)
        assert peek_current_user_id() == user_id


class TestSetAndClear:

    def test_set_then_get(self):
        user_id = uuid4()
        set_current_user_id(user_id)
        assert get_current_user_id() == user_id

    def test_clear_then_get_raises(self):
        set_current_user_id(uuid4())
        clear_current_user_id()
        with pytest.raises(RuntimeError):
            get_current_user_id()


class TestUserContextManager:

    def test_sets_and_clears(self):
        user_id = uuid4()

        with user_context(user_id):
            assert get_current_user_id() == user_id

        assert peek_current_user_id() is None

    def test_restores_previous(self):
        outer_id = uuid4()
        inner_id = uuid4()

        with user_context(outer_id):
            with user_context(inner_id):
                assert get_current_user_id() == inner_id
            assert get_current_user_id() == outer_id

    def test_clears_on_exception(self):
        with pytest.raises(ValueError):
            with user_context(uuid4()):
                raise ValueError("boom")

        assert peek_current_user_id() is None
