"""Tests for the result shapers against connection doubles."""

from datetime import datetime
from decimal import Decimal

import pytest

from connmate.database.interfaces import DataReader
from connmate.exceptions import (
    CommandExecutionError,
    InvalidArgumentError,
    ScalarCoercionError,
)
from connmate.execution.shapers import (
    execute,
    execute_reader,
    execute_scalar,
    with_data_reader,
)

from tests.utils.fake_connection import RecordingConnection


@pytest.mark.asyncio
@pytest.mark.parametrize(
    "call",
    [
        lambda conn: execute(conn, None),
        lambda conn: execute_scalar(conn, None, int),
        lambda conn: execute_reader(conn, None),
        lambda conn: with_data_reader(conn, None, list),
    ],
    ids=["execute", "execute_scalar", "execute_reader", "with_data_reader"],
)
async def test_none_command_text_fails_before_io(
    recording_connection: RecordingConnection, call
) -> None:
    """Test every shaper rejects absent command text without opening."""
    with pytest.raises(InvalidArgumentError):
        await call(recording_connection)

    assert recording_connection.calls == []


@pytest.mark.asyncio
async def test_with_data_reader_requires_body(
    recording_connection: RecordingConnection,
) -> None:
    """Test an absent reader body fails before any I/O."""
    with pytest.raises(InvalidArgumentError) as exc_info:
        await with_data_reader(recording_connection, "SELECT 1;", None)  # type: ignore[arg-type]

    assert exc_info.value.argument == "reader_body"
    assert recording_connection.calls == []


@pytest.mark.asyncio
async def test_execute_returns_row_count() -> None:
    """Test execute returns the affected-row count and commits."""
    connection = RecordingConnection(rowcount=2)

    result = await execute(connection, "DELETE FROM t", [("id", 1)])

    assert result == 2
    assert connection.transaction.commits == 1


@pytest.mark.asyncio
async def test_execute_scalar_coerces_value() -> None:
    """Test the scalar is converted to the requested type."""
    connection = RecordingConnection(scalar="42")

    assert await execute_scalar(connection, "SELECT '42'", int) == 42


@pytest.mark.asyncio
async def test_execute_scalar_datetime() -> None:
    """Test a textual timestamp is converted to datetime."""
    connection = RecordingConnection(scalar="2024-05-17 08:30:00")

    result = await execute_scalar(connection, "SELECT datetime('now');", datetime)

    assert isinstance(result, datetime)
    assert result == datetime(2024, 5, 17, 8, 30)


@pytest.mark.asyncio
@pytest.mark.parametrize(
    ("result_type", "expected"),
    [
        (int, 0),
        (float, 0.0),
        (str, ""),
        (Decimal, Decimal(0)),
        (datetime, datetime.min),
        (object, None),
    ],
)
async def test_execute_scalar_null_returns_default(result_type, expected) -> None:
    """Test a NULL scalar returns the type default instead of failing."""
    connection = RecordingConnection(scalar=None)

    assert await execute_scalar(connection, "SELECT NULL", result_type) == expected


@pytest.mark.asyncio
async def test_execute_scalar_without_type_returns_raw() -> None:
    """Test the raw value is returned when no type is requested."""
    connection = RecordingConnection(scalar=b"\x00\x01")

    assert await execute_scalar(connection, "SELECT x") == b"\x00\x01"


@pytest.mark.asyncio
async def test_execute_scalar_coercion_error_is_not_wrapped() -> None:
    """Test coercion failures surface directly after the commit."""
    connection = RecordingConnection(scalar="not a number")

    with pytest.raises(ScalarCoercionError) as exc_info:
        await execute_scalar(connection, "SELECT 'not a number'", int)

    assert not isinstance(exc_info.value, CommandExecutionError)
    assert isinstance(exc_info.value, TypeError)
    assert connection.transaction.commits == 1
    assert connection.transaction.rollbacks == 0


@pytest.mark.asyncio
async def test_execute_reader_rows_in_column_order() -> None:
    """Test each row becomes a dict keyed by column name in query order."""
    connection = RecordingConnection(
        columns=["Id", "Title", "Year"],
        rows=[(1, "Inception", 2010), (2, "Fight Club", 1999), (3, "Heat", None)],
    )

    rows = await execute_reader(connection, "SELECT Id, Title, Year FROM Movies")

    assert len(rows) == 3
    assert all(list(row) == ["Id", "Title", "Year"] for row in rows)
    assert rows[2] == {"Id": 3, "Title": "Heat", "Year": None}
    assert connection.readers[0].is_closed
    assert connection.transaction.commits == 1


@pytest.mark.asyncio
async def test_execute_reader_duplicate_columns_last_wins() -> None:
    """Test a later duplicate column overwrites an earlier one."""
    connection = RecordingConnection(columns=["id", "id"], rows=[(1, 2)])

    rows = await execute_reader(connection, "SELECT a.id, b.id FROM a, b")

    assert rows == [{"id": 2}]


@pytest.mark.asyncio
async def test_execute_reader_no_rows() -> None:
    """Test a query with no rows returns an empty list."""
    connection = RecordingConnection(columns=["id"], rows=[])

    assert await execute_reader(connection, "SELECT id FROM empty") == []


@pytest.mark.asyncio
async def test_with_data_reader_closes_reader_on_error() -> None:
    """Test the reader is closed and the transaction rolled back on error."""
    connection = RecordingConnection(columns=["id"], rows=[(1,)])

    def fail(reader: DataReader) -> None:
        reader.read()
        raise ValueError("bad row")

    with pytest.raises(CommandExecutionError) as exc_info:
        await with_data_reader(connection, "SELECT id FROM t", fail)

    assert isinstance(exc_info.value.__cause__, ValueError)
    assert connection.readers[0].is_closed
    assert connection.transaction.rollbacks == 1


@pytest.mark.asyncio
async def test_with_data_reader_returns_body_result() -> None:
    """Test the reader body's return value is passed through."""
    connection = RecordingConnection(columns=["n"], rows=[(1,), (2,), (3,)])

    def total(reader: DataReader) -> int:
        return sum(row["n"] for row in reader)

    assert await with_data_reader(connection, "SELECT n FROM t", total) == 6
