# services/api/adapters/sheets/__init__.py
from __future__ import annotations

import json
import logging
from typing import Any, List, Optional

import gspread
import requests
from google.auth.exceptions import GoogleAuthError
from google.oauth2.service_account import Credentials

from core.errors import UpstreamUnavailable, UpstreamWriteFailed

logger = logging.getLogger(__name__)

SCOPES = ["https://www.googleapis.com/auth/spreadsheets"]

# Errors that mean "the upstream call did not go through"
UPSTREAM_ERRORS = (
    gspread.exceptions.GSpreadException,
    requests.exceptions.RequestException,
    GoogleAuthError,
)


def _sa_client_from_json_or_path(google_sa_json: str) -> gspread.Client:
    """
    Accepts either:
      - absolute/relative path to a service-account JSON file, OR
      - a literal JSON string.
    Returns an authorized gspread Client.
    """
    if not google_sa_json:
        raise ValueError("Service account JSON is required (path to file or inline JSON).")

    # Try to treat as inline JSON first
    try:
        parsed = json.loads(google_sa_json)
        creds = Credentials.from_service_account_info(parsed, scopes=SCOPES)
        return gspread.authorize(creds)
    except json.JSONDecodeError:
        # Not JSON; treat as file path
        creds = Credentials.from_service_account_file(google_sa_json, scopes=SCOPES)
        return gspread.authorize(creds)


def _api_status(exc: BaseException) -> Optional[int]:
    """HTTP status of a gspread APIError, if there is one."""
    code = getattr(exc, "code", None)
    if isinstance(code, int):
        return code
    response = getattr(exc, "response", None)
    return getattr(response, "status_code", None)


class SheetsBackend:
    """
    Google Sheets implementation of adapters.base.SpreadsheetBackend.

    - One spreadsheet, one fixed range (A:Z of the first tab by default)
    - Service account => read/write, API key => read-only
    - No retries: a failed call is reported once and the caller decides
    """

    def __init__(
        self,
        spreadsheet_id: str,
        google_sa_json: Optional[str] = None,
        api_key: Optional[str] = None,
        sheet_range: str = "A:Z",
    ) -> None:
        if not spreadsheet_id:
            raise ValueError("SheetsBackend requires SHEETS_SPREADSHEET_ID")

        if google_sa_json:
            self.gc = _sa_client_from_json_or_path(google_sa_json)
            self.read_only = False
        elif api_key:
            logger.info("Using API key (read-only). Configure a service account to enable writes.")
            self.gc = gspread.api_key(api_key)
            self.read_only = True
        else:
            raise ValueError("SheetsBackend requires a service account or GOOGLE_API_KEY")

        self.spreadsheet_id = spreadsheet_id
        self.sheet_range = sheet_range
        self._ss: Optional[gspread.Spreadsheet] = None

    @property
    def ss(self) -> gspread.Spreadsheet:
        # Opened lazily so the app can start while the API is unreachable
        if self._ss is None:
            self._ss = self.gc.open_by_key(self.spreadsheet_id)
        return self._ss

    # ========== SpreadsheetBackend API ==========

    def read_range(self) -> List[List[str]]:
        try:
            resp = self.ss.values_get(self.sheet_range)
        except UPSTREAM_ERRORS as e:
            logger.error(f"Sheets read failed: {e}")
            raise UpstreamUnavailable(detail=str(e)) from e
        return resp.get("values", []) or []

    def append_row(self, values: List[Any]) -> int:
        try:
            resp = self.ss.values_append(
                self.sheet_range,
                params={"valueInputOption": "USER_ENTERED", "insertDataOption": "INSERT_ROWS"},
                body={"values": [values]},
            )
        except UPSTREAM_ERRORS as e:
            logger.error(f"Sheets append failed: {e}")
            raise UpstreamWriteFailed.from_status(_api_status(e), detail=str(e)) from e
        return int((resp.get("updates") or {}).get("updatedCells", 0) or 0)

    def update_row(self, row_index: int, values: List[Any]) -> int:
        row_range = f"{row_index}:{row_index}"
        try:
            resp = self.ss.values_update(
                row_range,
                params={"valueInputOption": "USER_ENTERED"},
                body={"values": [values]},
            )
        except UPSTREAM_ERRORS as e:
            logger.error(f"Sheets update of row {row_index} failed: {e}")
            raise UpstreamWriteFailed.from_status(_api_status(e), detail=str(e)) from e
        return int(resp.get("updatedCells", 0) or 0)


def build_backend(settings) -> SheetsBackend:
    """Create the Sheets backend from Settings."""
    return SheetsBackend(
        spreadsheet_id=settings.sheets_spreadsheet_id,
        google_sa_json=settings.resolved_google_credentials(),
        api_key=settings.google_api_key,
        sheet_range=settings.sheets_range,
    )
