"""Tests for PostgresClient - pooling, admin attribution and query helpers."""

from unittest.mock import MagicMock, call, patch
from uuid import UUID, uuid4

import pytest

from clients.postgres_client import PostgresClient
from utils.user_context import user_context

SET_USER_SQL = "SELECT set_config('app.current_user_id', %s, false)"


@pytest.fixture
def pool_factory():
    with patch("clients.postgres_client.psycopg2.pool.ThreadedConnectionPool") as factory, \
            patch("clients.postgres_client.psycopg2.extras.register_default_jsonb"):
        yield factory
    PostgresClient.close_all_pools()


@pytest.fixture
def cursor(pool_factory):
    """Cursor shared by every `with conn.cursor()` block."""
    cur = MagicMock()
    conn = MagicMock()
    conn.cursor.return_value.__enter__.return_value = cur
    pool_factory.return_value.getconn.return_value = conn
    return cur


@pytest.fixture
def pg(pool_factory):
    return PostgresClient(f"postgresql://test/{uuid4()}")


class TestPool:

    def test_pool_shared_per_url(self, pool_factory):
        url = f"postgresql://test/{uuid4()}"
        PostgresClient(url)
        PostgresClient(url)
        assert pool_factory.call_count == 1

    def test_connection_returned_to_pool(self, pg, cursor, pool_factory):
        pg.execute("SELECT 1")
        pool = pool_factory.return_value
        pool.putconn.assert_called_once_with(pool.getconn.return_value)

    def test_empty_pool_raises(self, pg, pool_factory):
        pool_factory.return_value.getconn.return_value = None
        with pytest.raises(RuntimeError, match="Could not get connection"):
            pg.execute("SELECT 1")


class TestAdminAttribution:

    def test_sets_acting_admin(self, pg, cursor):
        admin_id = UUID("00000000-0000-0000-0000-000000000001")
        with user_context(admin_id):
            pg.execute("SELECT 1")

        assert cursor.execute.call_args_list[0] == call(SET_USER_SQL, (str(admin_id),))

    def test_anonymous_read_clears_setting(self, pg, cursor):
        pg.execute("SELECT 1")
        assert cursor.execute.call_args_list[0] == call(SET_USER_SQL, ("",))


class TestExecuteMethods:

    def test_execute_returns_list_of_dicts(self, pg, cursor):
        cursor.description = [("num",)]
        cursor.fetchall.return_value = [{"num": 1}]

        assert pg.execute("SELECT 1 AS num") == [{"num": 1}]

    def test_statement_without_rows(self, pg, cursor):
        cursor.description = None
        assert pg.execute("UPDATE packages SET name = name") == []

    def test_execute_single(self, pg, cursor):
        cursor.description = [("answer",)]
        cursor.fetchall.return_value = [{"answer": 42}, {"answer": 43}]

        assert pg.execute_single("SELECT answer") == {"answer": 42}

    def test_execute_single_none(self, pg, cursor):
        cursor.description = [("answer",)]
        cursor.fetchall.return_value = []

        assert pg.execute_single("SELECT answer") is None

    def test_uuid_params_converted(self, pg, cursor):
        row_id = uuid4()
        cursor.fetchall.return_value = [{"id": str(row_id)}]

        pg.execute_returning("UPDATE x SET y = 1 WHERE id = %s RETURNING id", (row_id, [row_id]))

        assert cursor.execute.call_args_list[1].args[1] == (str(row_id), [str(row_id)])

    def test_rollback_on_error(self, pg, cursor, pool_factory):
        conn = pool_factory.return_value.getconn.return_value
        cursor.execute.side_effect = [None, ValueError("boom")]

        with pytest.raises(ValueError, match="boom"):
            pg.execute("SELECT broken")

        conn.rollback.assert_called_once()
        conn.commit.assert_not_called()
