import pytest

from pyrink.config.tables import TableKind, get_schema
from pyrink.errors import HeaderOrderError, ResolutionError, SchemaError, TransientStoreError
from pyrink.models import Player
from pyrink.workbook.codec import encode_players
from pyrink.workbook.store import HeaderRow
from pyrink.workbook.writer import pad_row, reconcile_rows, replace_table_rows, resolve_column_count
from tests.fake_store import FakeWorkbookStore


ROSTER_COLUMNS = get_schema(TableKind.ROSTER).columns


def _players(count: int) -> list[Player]:
    return [Player(id=f"p{i}", number=i + 1, name=f"Player {i}") for i in range(count)]


def _existing_rows(count: int) -> list[list[str]]:
    return [[f"old{i}", str(i), f"Old {i}", "F"] for i in range(count)]


@pytest.mark.parametrize("row, n", [([], 3), (["a"], 4), (["a", "b", "c"], 3), (["a", "b", "c", "d"], 2)])
def test_pad_row(row, n):
    padded = pad_row(row, n)
    if len(row) < n:
        assert len(padded) == n
        assert padded[: len(row)] == row
        assert padded[len(row):] == [""] * (n - len(row))
    else:
        assert padded == row


def test_resolve_column_count_priority():
    rows = [["a", "b"]]
    assert resolve_column_count(HeaderRow("S!A1:F1", 6, [["x", "y"]]), rows) == 6
    assert resolve_column_count(HeaderRow("S!A1:C1", None, [["x", "y", "z"]]), rows) == 3
    assert resolve_column_count(HeaderRow("S!A1:A1", 0, []), rows) == 2
    assert resolve_column_count(HeaderRow("S!A1:A1", None, []), []) == 0


def test_reconcile_rows_never_returns_empty_body():
    assert reconcile_rows([], 4, 0) == [["", "", "", ""]]


def test_reconcile_rows_extends_to_current_count():
    body = reconcile_rows([["a"]], 2, 3)
    assert body == [["a", ""], ["", ""], ["", ""]]


@pytest.mark.anyio
async def test_growth_appends_missing_rows_before_commit():
    store = FakeWorkbookStore()
    store.add_table("Roster", TableKind.ROSTER, rows=_existing_rows(2), sheet="Roster")

    plan = await replace_table_rows(store, "Roster", encode_players(_players(3)), expected_columns=ROSTER_COLUMNS)

    assert store.appended == [("Roster", 1)]
    assert plan.appended_rows == 1
    address, values = store.last_write("Roster")
    assert address == "Roster!A1:D4"
    assert len(values) == 4
    assert values[0] == list(ROSTER_COLUMNS)
    assert [row[0] for row in values[1:]] == ["p0", "p1", "p2"]
    assert store.calls.index(("add_rows", "Roster")) < store.calls.index(("write_range", "Roster"))


@pytest.mark.anyio
async def test_shrink_overwrites_every_previous_row():
    store = FakeWorkbookStore()
    store.add_table("Roster", TableKind.ROSTER, rows=_existing_rows(5), sheet="Roster")

    await replace_table_rows(store, "Roster", encode_players(_players(2)))

    assert store.appended == []
    address, values = store.last_write("Roster")
    assert address == "Roster!A1:D6"
    assert len(values) == 6
    assert [row[0] for row in values[1:]] == ["p0", "p1", "", "", ""]
    assert all(row == ["", "", "", ""] for row in values[3:])


@pytest.mark.anyio
async def test_saving_zero_records_writes_one_blank_row():
    store = FakeWorkbookStore()
    store.add_table("Roster", TableKind.ROSTER, rows=_existing_rows(1), sheet="Roster")

    await replace_table_rows(store, "Roster", [])

    address, values = store.last_write("Roster")
    assert address == "Roster!A1:D2"
    assert values[1:] == [["", "", "", ""]]


@pytest.mark.anyio
async def test_saving_zero_records_into_empty_table_appends_placeholder():
    store = FakeWorkbookStore()
    store.add_table("Roster", TableKind.ROSTER, sheet="Roster")

    await replace_table_rows(store, "Roster", [])

    assert store.appended == [("Roster", 1)]
    _, values = store.last_write("Roster")
    assert len(values) == 2
    assert len(values[1]) == len(ROSTER_COLUMNS)


@pytest.mark.anyio
async def test_live_header_is_written_verbatim_and_extra_columns_blanked():
    store = FakeWorkbookStore()
    header = ["playerId", " Number", "NAME", "position", "Shoots"]
    store.add_table("Roster", header=header, rows=[["p1", "9", "Nine", "C", "L"]], sheet="Roster")

    await replace_table_rows(store, "Roster", encode_players(_players(1)), expected_columns=ROSTER_COLUMNS)

    address, values = store.last_write("Roster")
    assert address == "Roster!A1:E2"
    assert values[0] == header
    assert values[1] == ["p0", "1", "Player 0", "", ""]


@pytest.mark.anyio
async def test_header_order_mismatch_fails_before_mutation():
    store = FakeWorkbookStore()
    store.add_table("Roster", header=["name", "PlayerId", "number", "position"], rows=_existing_rows(1), sheet="Roster")

    with pytest.raises(HeaderOrderError) as excinfo:
        await replace_table_rows(store, "Roster", encode_players(_players(3)), expected_columns=ROSTER_COLUMNS)

    assert isinstance(excinfo.value, SchemaError)
    assert str(excinfo.value) == (
        "Table Roster header is out of schema order at: PlayerId, number, name "
        "(expected PlayerId, number, name, position)"
    )
    assert "missing" not in str(excinfo.value)
    assert excinfo.value.mismatched_columns == ["PlayerId", "number", "name"]
    assert store.appended == []
    assert store.writes == []


@pytest.mark.anyio
async def test_range_is_anchored_at_header_cell_on_quoted_sheet():
    store = FakeWorkbookStore()
    store.add_table(
        "Roster",
        TableKind.ROSTER,
        rows=_existing_rows(1),
        sheet="Coach's Roster",
        anchor_column="C",
        anchor_row=3,
    )

    await replace_table_rows(store, "Roster", encode_players(_players(1)))

    address, _ = store.last_write("Roster")
    assert address == "'Coach''s Roster'!C3:F4"


@pytest.mark.anyio
async def test_declared_column_count_wins_over_header_width():
    store = FakeWorkbookStore()
    store.add_table("Roster", TableKind.ROSTER, rows=_existing_rows(1), sheet="Roster", declared_column_count=6)

    await replace_table_rows(store, "Roster", encode_players(_players(1)))

    address, values = store.last_write("Roster")
    assert address == "Roster!A1:F2"
    assert values[0] == list(ROSTER_COLUMNS) + ["", ""]
    assert all(len(row) == 6 for row in values)


@pytest.mark.anyio
async def test_column_count_falls_back_to_first_row_width():
    store = FakeWorkbookStore()
    store.add_table("Roster", header=[], sheet="Roster")

    plan = await replace_table_rows(store, "Roster", encode_players(_players(2)))

    assert plan.column_count == 4
    assert plan.header == ["", "", "", ""]


@pytest.mark.anyio
async def test_unresolvable_column_count_raises():
    store = FakeWorkbookStore()
    store.add_table("Roster", header=[], sheet="Roster")

    with pytest.raises(ResolutionError):
        await replace_table_rows(store, "Roster", [])


@pytest.mark.anyio
async def test_worksheet_falls_back_to_range_lookup():
    store = FakeWorkbookStore()
    store.add_table("Roster", TableKind.ROSTER, sheet="Roster")
    store.primary_worksheet_missing.add("Roster")

    plan = await replace_table_rows(store, "Roster", encode_players(_players(1)))

    assert plan.worksheet.name == "Roster"
    assert ("find_worksheet_by_range", "Roster") in store.calls


@pytest.mark.anyio
async def test_unresolvable_worksheet_raises():
    store = FakeWorkbookStore()
    store.add_table("Roster", TableKind.ROSTER, sheet="Roster")
    store.primary_worksheet_missing.add("Roster")
    store.fallback_worksheet_missing.add("Roster")

    with pytest.raises(ResolutionError):
        await replace_table_rows(store, "Roster", encode_players(_players(1)))
    assert store.writes == []


@pytest.mark.anyio
async def test_missing_data_body_during_clear_is_tolerated():
    store = FakeWorkbookStore()
    store.add_table("Roster", TableKind.ROSTER, rows=_existing_rows(2), sheet="Roster")
    store.missing_data_body_on_clear.add("Roster")

    await replace_table_rows(store, "Roster", encode_players(_players(2)))

    assert store.cleared == []
    assert len(store.writes) == 1


@pytest.mark.anyio
async def test_clear_failure_propagates():
    store = FakeWorkbookStore()
    store.add_table("Roster", TableKind.ROSTER, rows=_existing_rows(2), sheet="Roster")
    store.fail_on.add(("clear_range", "Roster"))

    with pytest.raises(TransientStoreError):
        await replace_table_rows(store, "Roster", encode_players(_players(2)))
    assert store.writes == []


@pytest.mark.anyio
async def test_clear_runs_before_write():
    store = FakeWorkbookStore()
    store.add_table("Roster", TableKind.ROSTER, rows=_existing_rows(2), sheet="Roster")

    await replace_table_rows(store, "Roster", encode_players(_players(2)))

    assert store.cleared == [("Roster", "Roster!A2:D3")]
    assert store.calls.index(("clear_range", "Roster")) < store.calls.index(("write_range", "Roster"))


@pytest.mark.anyio
async def test_unparseable_header_address_raises_resolution_error():
    store = FakeWorkbookStore()
    store.add_table("Roster", TableKind.ROSTER, sheet="Roster")

    async def broken_header(table):
        return HeaderRow(address="", column_count=4, values=[list(ROSTER_COLUMNS)])

    store.get_header_row = broken_header

    with pytest.raises(ResolutionError):
        await replace_table_rows(store, "Roster", encode_players(_players(1)))
    assert store.writes == []
    assert store.appended == []
