from __future__ import annotations

import socket
import time
from collections import Counter
from collections.abc import Callable, Sequence
from pathlib import Path
from typing import Any

from google.oauth2.service_account import Credentials
from googleapiclient.discovery import build
from googleapiclient.errors import HttpError
from loguru import logger

BACKOFF_CAP_SEC = 30
MAX_RETRIES = 3
SCOPES = ["https://www.googleapis.com/auth/spreadsheets"]

RETRYABLE_IO_ERRORS = (
    BrokenPipeError,
    TimeoutError,
    ConnectionError,
    socket.timeout,
)


class SheetsClient:
    """Google Sheets access for the restaurant settings store, with retries."""

    def __init__(
        self,
        spreadsheet_id: str,
        service_account_file: Path,
        *,
        service: Any | None = None,
        error_notifier: Callable[[str, Exception], None] | None = None,
        sleep: Callable[[float], None] = time.sleep,
    ) -> None:
        self.spreadsheet_id = spreadsheet_id
        self._error_notifier = error_notifier
        self._error_counts: Counter[str] = Counter()
        self._sleep = sleep
        if service is not None:
            self._service = service
            return
        creds = Credentials.from_service_account_file(str(service_account_file), scopes=SCOPES)
        self._service = build("sheets", "v4", credentials=creds, cache_discovery=False)

    def read(self, sheet_range: str) -> list[list[str]]:
        response = self._execute_with_retry(
            lambda: self._service.spreadsheets()
            .values()
            .get(spreadsheetId=self.spreadsheet_id, range=sheet_range)
            .execute()
        )
        return response.get("values", [])

    def write(self, sheet_range: str, values: Sequence[Sequence[str]]) -> None:
        body = {"values": [list(row) for row in values]}
        self._execute_with_retry(
            lambda: self._service.spreadsheets()
            .values()
            .update(
                spreadsheetId=self.spreadsheet_id,
                range=sheet_range,
                valueInputOption="RAW",
                body=body,
            )
            .execute()
        )

    def _execute_with_retry(self, func: Callable[[], Any]) -> Any:
        delay = 1.0
        for attempt in range(1, MAX_RETRIES + 1):
            try:
                return func()
            except HttpError as err:
                self._handle_failure("http_error", err, attempt)
            except RETRYABLE_IO_ERRORS as err:
                self._handle_failure("io_error", err, attempt)
            self._sleep(delay)
            delay = min(delay * 2, BACKOFF_CAP_SEC)
        raise AssertionError("unreachable")

    def _handle_failure(self, kind: str, err: Exception, attempt: int) -> None:
        self._error_counts[kind] += 1
        logger.warning(
            "Settings sheet request failed [{}] ({}/{}): {}", kind, attempt, MAX_RETRIES, err
        )
        if attempt == MAX_RETRIES:
            self._emit_alert(kind, err)
            raise err

    def get_error_stats(self) -> Counter[str]:
        return Counter(self._error_counts)

    def _emit_alert(self, kind: str, err: Exception) -> None:
        logger.error("Settings sheet error alert [{}]: {}", kind, err)
        if not self._error_notifier:
            return
        try:
            self._error_notifier(kind, err)
        except Exception as notifier_err:  # noqa: BLE001
            logger.error("Settings sheet error notifier failed: {}", notifier_err)
