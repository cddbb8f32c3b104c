# storefront/domain/catalog/sheets.py
"""Read access to the Google Sheet that holds the catalog of record."""
import asyncio
import json
import logging
from typing import Any, List, Optional, Protocol

import gspread
from google.auth.exceptions import GoogleAuthError
from google.oauth2.service_account import Credentials

from storefront.core.config import Settings, settings as default_settings
from storefront.core.errors import RemoteFetchError, SheetNotConfiguredError

logger = logging.getLogger(__name__)

SCOPES = ["https://www.googleapis.com/auth/spreadsheets.readonly"]
DEFAULT_WORKSHEET = "Sheet1"


class SheetSource(Protocol):
    async def fetch_rows(self) -> List[List[Any]]:
        ...


class GoogleSheetSource:
    """Fetches the raw data rows of the first worksheet.

    gspread is blocking, so each call runs in a worker thread under a
    timeout. The spreadsheet metadata and worksheet title are looked up once
    and reused for the life of the instance.
    """

    def __init__(self, config: Settings = None):
        self.config = config or default_settings
        self._client: Optional[gspread.Client] = None
        self._spreadsheet_handle: Optional[gspread.Spreadsheet] = None
        self._worksheet_title: Optional[str] = None

    def _credentials(self) -> Credentials:
        if self.config.GOOGLE_SERVICE_ACCOUNT_INFO:
            info = json.loads(self.config.GOOGLE_SERVICE_ACCOUNT_INFO)
            return Credentials.from_service_account_info(info, scopes=SCOPES)
        if self.config.GOOGLE_SERVICE_ACCOUNT_FILE:
            return Credentials.from_service_account_file(self.config.GOOGLE_SERVICE_ACCOUNT_FILE, scopes=SCOPES)
        raise SheetNotConfiguredError("Google service account credentials are not configured")

    def _spreadsheet(self) -> gspread.Spreadsheet:
        if not self.config.LIVE_SHEET_ID:
            raise SheetNotConfiguredError("LIVE_SHEET_ID not configured")
        if self._spreadsheet_handle is None:
            if self._client is None:
                self._client = gspread.authorize(self._credentials())
            self._spreadsheet_handle = self._client.open_by_key(self.config.LIVE_SHEET_ID)
        return self._spreadsheet_handle

    def _resolve_worksheet_title(self, spreadsheet: gspread.Spreadsheet) -> str:
        if self._worksheet_title is None:
            try:
                worksheet = spreadsheet.get_worksheet(0)
            except gspread.WorksheetNotFound:
                worksheet = None
            if worksheet is None:
                raise RemoteFetchError("No sheets found in the spreadsheet")
            self._worksheet_title = worksheet.title or DEFAULT_WORKSHEET
        return self._worksheet_title

    def _fetch_blocking(self) -> List[List[Any]]:
        spreadsheet = self._spreadsheet()
        title = self._resolve_worksheet_title(spreadsheet)
        response = spreadsheet.values_get(
            f"'{title}'!{self.config.SHEET_DATA_RANGE}",
            params={"majorDimension": "ROWS", "valueRenderOption": "UNFORMATTED_VALUE"},
        )
        return response.get("values", [])

    async def fetch_rows(self) -> List[List[Any]]:
        try:
            rows = await asyncio.wait_for(
                asyncio.to_thread(self._fetch_blocking),
                timeout=self.config.SHEET_FETCH_TIMEOUT,
            )
        except RemoteFetchError:
            raise
        except asyncio.TimeoutError as exc:
            raise RemoteFetchError(
                f"Timed out after {self.config.SHEET_FETCH_TIMEOUT}s reading the catalog sheet"
            ) from exc
        except (gspread.exceptions.GSpreadException, GoogleAuthError, OSError, ValueError) as exc:
            raise RemoteFetchError(f"Unable to read the catalog sheet: {exc}") from exc

        logger.info("Fetched %d rows from sheet %s", len(rows), self._worksheet_title)
        return rows
