"""Microsoft Graph implementation of the workbook store contract."""

from __future__ import annotations

import logging
from contextlib import asynccontextmanager
from typing import Any, AsyncIterator, Dict, List, Optional, Sequence

import httpx

from pyrink.config.settings import WorkbookSettings
from pyrink.errors import RangeNotFoundError, TransientStoreError
from pyrink.workbook.addressing import split_range_address
from pyrink.workbook.auth import ClientSecretTokenProvider, TokenProvider
from pyrink.workbook.store import CellValue, HeaderRow, WorksheetRef


logger = logging.getLogger(__name__)

DEFAULT_TIMEOUT = 30.0


def _odata_literal(value: str) -> str:
    return value.replace("'", "''")


def _local_address(address: str) -> str:
    _, start, end = split_range_address(address)
    return f"{start}:{end}" if end else start


class GraphWorkbookStore:
    """Workbook tables of one drive item, reached through the Graph REST API."""

    def __init__(
        self,
        settings: WorkbookSettings,
        http_client: httpx.AsyncClient,
        token_provider: TokenProvider,
    ):
        settings.validate_identifiers()
        self._http = http_client
        self._tokens = token_provider
        self._workbook_path = f"/drives/{settings.drive_id}/items/{settings.item_id}/workbook"

    def _table_path(self, table: str, suffix: str = "") -> str:
        return f"{self._workbook_path}/tables('{_odata_literal(table)}'){suffix}"

    def _range_path(self, worksheet: WorksheetRef, address: str, suffix: str = "") -> str:
        return (
            f"{self._workbook_path}/worksheets('{_odata_literal(worksheet.worksheet_id)}')"
            f"/range(address='{_odata_literal(_local_address(address))}'){suffix}"
        )

    async def _request(
        self,
        method: str,
        url: str,
        *,
        params: Optional[Dict[str, str]] = None,
        json: Any = None,
    ) -> Dict[str, Any]:
        token = await self._tokens.get_token()
        try:
            resp = await self._http.request(
                method,
                url,
                params=params,
                json=json,
                headers={"Authorization": f"Bearer {token}"},
            )
        except httpx.HTTPError as exc:
            raise TransientStoreError(f"{method} {url} failed: {exc}") from exc

        if resp.status_code == 404:
            raise RangeNotFoundError(f"{method} {url} not found", status_code=404)
        if resp.is_error:
            raise TransientStoreError(
                f"{method} {url} failed with {resp.status_code}: {_error_message(resp)}",
                status_code=resp.status_code,
            )
        if resp.status_code == 204 or not resp.content:
            return {}
        try:
            return resp.json()
        except ValueError as exc:
            raise TransientStoreError(f"{method} {url} returned invalid JSON") from exc

    async def _get_collection(self, url: str, params: Dict[str, str]) -> List[Dict[str, Any]]:
        payload = await self._request("GET", url, params=params)
        items = list(payload.get("value") or [])
        next_link = payload.get("@odata.nextLink")
        while next_link:
            payload = await self._request("GET", next_link)
            items.extend(payload.get("value") or [])
            next_link = payload.get("@odata.nextLink")
        return items

    async def list_column_names(self, table: str) -> List[str]:
        columns = await self._get_collection(self._table_path(table, "/columns"), {"$select": "name"})
        return [str(column.get("name", "")) for column in columns]

    async def list_row_values(self, table: str) -> List[List[CellValue]]:
        rows = await self._get_collection(self._table_path(table, "/rows"), {"$select": "values"})
        return [list((row.get("values") or [[]])[0]) for row in rows]

    async def get_row_count(self, table: str) -> int:
        rows = await self._get_collection(self._table_path(table, "/rows"), {"$select": "index"})
        return len(rows)

    async def add_rows(self, table: str, rows: Sequence[Sequence[CellValue]]) -> None:
        if not rows:
            return
        await self._request(
            "POST",
            self._table_path(table, "/rows/add"),
            json={"index": None, "values": [list(row) for row in rows]},
        )

    async def get_worksheet(self, table: str) -> Optional[WorksheetRef]:
        try:
            payload = await self._request(
                "GET", self._table_path(table, "/worksheet"), params={"$select": "id,name"}
            )
        except RangeNotFoundError:
            return None
        worksheet_id = payload.get("id")
        name = payload.get("name")
        if not worksheet_id or not name:
            logger.warning("Table %s: worksheet lookup returned %r", table, payload)
            return None
        return WorksheetRef(worksheet_id=str(worksheet_id), name=str(name))

    async def find_worksheet_by_range(self, table: str) -> Optional[WorksheetRef]:
        try:
            payload = await self._request(
                "GET", self._table_path(table, "/range"), params={"$select": "address"}
            )
        except RangeNotFoundError:
            return None
        sheet_name, _, _ = split_range_address(str(payload.get("address") or ""))
        if not sheet_name:
            return None
        # Graph accepts a worksheet's name wherever its id is expected.
        return WorksheetRef(worksheet_id=sheet_name, name=sheet_name)

    async def get_header_row(self, table: str) -> HeaderRow:
        payload = await self._request(
            "GET",
            self._table_path(table, "/headerRowRange"),
            params={"$select": "address,columnCount,values"},
        )
        column_count = payload.get("columnCount")
        return HeaderRow(
            address=str(payload.get("address") or ""),
            column_count=int(column_count) if isinstance(column_count, (int, float)) else None,
            values=[list(row) for row in payload.get("values") or []],
        )

    async def get_data_body_address(self, table: str) -> Optional[str]:
        try:
            payload = await self._request(
                "GET", self._table_path(table, "/dataBodyRange"), params={"$select": "address"}
            )
        except RangeNotFoundError:
            return None
        return payload.get("address") or None

    async def clear_range(self, worksheet: WorksheetRef, address: str) -> None:
        await self._request(
            "POST",
            self._range_path(worksheet, address, "/clear"),
            json={"applyTo": "Contents"},
        )

    async def write_range(
        self,
        worksheet: WorksheetRef,
        address: str,
        values: Sequence[Sequence[CellValue]],
    ) -> None:
        await self._request(
            "PATCH",
            self._range_path(worksheet, address),
            json={"values": [list(row) for row in values]},
        )


def _error_message(resp: httpx.Response) -> str:
    try:
        error = resp.json().get("error") or {}
    except (ValueError, AttributeError):
        return resp.text[:200]
    return str(error.get("message") or error.get("code") or resp.reason_phrase)


@asynccontextmanager
async def open_graph_store(
    settings: WorkbookSettings,
    *,
    token_provider: Optional[TokenProvider] = None,
    timeout: float = DEFAULT_TIMEOUT,
) -> AsyncIterator[GraphWorkbookStore]:
    """Yield a store backed by a fresh ``httpx.AsyncClient``.

    Without an explicit ``token_provider`` a client-secret provider is built
    from ``settings`` and closed when the store is released.
    """

    owned = None
    if token_provider is None:
        owned = ClientSecretTokenProvider.from_settings(settings)
    try:
        async with httpx.AsyncClient(base_url=settings.graph_base_url, timeout=timeout) as client:
            yield GraphWorkbookStore(settings, client, token_provider or owned)
    finally:
        if owned is not None:
            await owned.close()
