"""Unit tests: run / get / all façade over a fake pool."""
import asyncio
from datetime import datetime, timezone

import psycopg
import pytest
from psycopg_pool import PoolTimeout

from db.errors import ExecutionError, QueryError, StoreConnectionError

pytestmark = pytest.mark.unit


@pytest.mark.asyncio
async def test_run_returns_insert_id_and_changes(db, fake_pool):
    fake_pool.queue(rows=[{"id": 7}], rowcount=1)
    result = await db.run(
        "INSERT INTO user_locations (user_name, latitude, longitude) VALUES (?, ?, ?) RETURNING id",
        ["alice", 41.3, 69.2],
    )
    assert result.insert_id == 7
    assert result.changes == 1
    sql, params = fake_pool.executed[0]
    assert "VALUES ($1, $2, $3)" in sql
    assert params == ["alice", 41.3, 69.2]


@pytest.mark.asyncio
async def test_run_without_returning_has_no_insert_id(db, fake_pool):
    fake_pool.queue(rows=[], rowcount=0)
    result = await db.run("DELETE FROM user_locations WHERE id = ?", [999])
    assert result.insert_id is None
    assert result.changes == 0


@pytest.mark.asyncio
async def test_run_reports_multiple_changes(db, fake_pool):
    fake_pool.queue(rows=[], rowcount=3)
    result = await db.run("DELETE FROM user_locations WHERE user_name = ?", ["bob"])
    assert result.changes == 3


@pytest.mark.asyncio
async def test_get_returns_first_row(db, fake_pool):
    ts = datetime.now(timezone.utc)
    fake_pool.queue(rows=[{"id": 1, "timestamp": ts}, {"id": 2, "timestamp": ts}])
    row = await db.get("SELECT * FROM user_locations WHERE user_name = ?", ["alice"])
    assert row == {"id": 1, "timestamp": ts}


@pytest.mark.asyncio
async def test_get_empty_returns_none(db, fake_pool):
    fake_pool.queue(rows=[])
    assert await db.get("SELECT * FROM user_locations WHERE id = ?", [1]) is None


@pytest.mark.asyncio
async def test_get_count_on_empty_table(db, fake_pool):
    fake_pool.queue(rows=[{"count": 0}])
    row = await db.get("SELECT COUNT(*) as count FROM user_locations")
    assert row["count"] == 0


@pytest.mark.asyncio
async def test_all_preserves_store_order(db, fake_pool):
    rows = [{"id": 3}, {"id": 1}, {"id": 2}]
    fake_pool.queue(rows=rows)
    assert await db.all("SELECT id FROM user_locations ORDER BY timestamp DESC") == rows


@pytest.mark.asyncio
async def test_all_empty_returns_empty_list(db, fake_pool):
    fake_pool.queue(rows=[])
    assert await db.all("SELECT * FROM user_locations") == []


@pytest.mark.asyncio
async def test_default_params_are_empty(db, fake_pool):
    await db.all("SELECT * FROM user_locations")
    assert fake_pool.executed == [("SELECT * FROM user_locations", [])]


@pytest.mark.asyncio
async def test_one_connection_per_call(db, fake_pool):
    await db.run("DELETE FROM user_locations WHERE id = ?", [1])
    await db.get("SELECT 1")
    await db.all("SELECT 1")
    assert fake_pool.acquired == 3
    assert fake_pool.in_use == 0
    assert len(fake_pool.executed) == 3


@pytest.mark.asyncio
async def test_execution_error_is_translated_and_released(db, fake_pool):
    cause = psycopg.errors.NotNullViolation("null value in column \"latitude\"")
    fake_pool.errors.append(cause)
    with pytest.raises(ExecutionError) as exc_info:
        await db.run("INSERT INTO user_locations (latitude) VALUES (?)", [None])
    assert exc_info.value.cause is cause
    assert exc_info.value.__cause__ is cause
    assert fake_pool.in_use == 0


@pytest.mark.asyncio
async def test_no_retry_after_failure(db, fake_pool):
    fake_pool.errors.append(psycopg.errors.SyntaxError("syntax error"))
    with pytest.raises(QueryError):
        await db.all("SELEC * FROM user_locations")
    assert len(fake_pool.executed) == 1


@pytest.mark.asyncio
async def test_lost_connection_during_execute(db, fake_pool):
    fake_pool.errors.append(psycopg.OperationalError("server closed the connection"))
    with pytest.raises(StoreConnectionError):
        await db.get("SELECT 1")
    assert fake_pool.in_use == 0


@pytest.mark.asyncio
async def test_acquire_timeout_is_connection_error(db, fake_pool):
    fake_pool.acquire_error = PoolTimeout("couldn't get a connection after 30.00 sec")
    with pytest.raises(StoreConnectionError) as exc_info:
        await db.all("SELECT 1")
    assert isinstance(exc_info.value.cause, PoolTimeout)
    assert fake_pool.executed == []


@pytest.mark.asyncio
async def test_query_error_from_pool_passes_through(db, fake_pool):
    error = StoreConnectionError("Database pool not initialized. Call open() first.")
    fake_pool.acquire_error = error
    with pytest.raises(StoreConnectionError) as exc_info:
        await db.get("SELECT 1")
    assert exc_info.value is error


@pytest.mark.asyncio
async def test_cancelled_call_releases_connection(db, fake_pool):
    fake_pool.gate = asyncio.Event()
    task = asyncio.create_task(db.all("SELECT pg_sleep(10)"))
    while not fake_pool.executed:
        await asyncio.sleep(0)
    assert fake_pool.in_use == 1
    task.cancel()
    with pytest.raises(asyncio.CancelledError):
        await task
    assert fake_pool.in_use == 0


@pytest.mark.asyncio
async def test_concurrent_calls_use_separate_connections(db, fake_pool):
    fake_pool.gate = asyncio.Event()
    tasks = [asyncio.create_task(db.get("SELECT ?", [i])) for i in range(3)]
    while len(fake_pool.executed) < 3:
        await asyncio.sleep(0)
    assert fake_pool.in_use == 3
    fake_pool.gate.set()
    await asyncio.gather(*tasks)
    assert fake_pool.in_use == 0
