# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Google Sheets API client.

This module provides an async HTTP client for the Sheets REST API (v4)
values endpoints. It is the only component that talks to the network;
everything above it works on plain rows of text.

The client handles:
- Service account authentication (google-auth)
- Reading a rectangular range
- Appending a row after the last row of a range
- Overwriting a row range

Example:
    client = SheetsClient(settings.sheets)
    await client.connect()

    rows = await client.read_range("Courses!A:Z")
    await client.append_row("Courses!A:Z", ["c1", "Intro", ...])
    await client.update_row("Courses!A2:Z2", ["c1", "Intro v2", ...])

    await client.close()
"""

import asyncio
import logging
from typing import Any
from urllib.parse import quote

import httpx
from google.auth.exceptions import GoogleAuthError
from google.auth.transport.requests import Request
from google.oauth2 import service_account

from sheetlms.core.config.settings import SheetsSettings
from sheetlms.infrastructure.sheets.exceptions import RemoteUnavailableError, SheetsError

logger = logging.getLogger(__name__)

SHEETS_SCOPES = ["https://www.googleapis.com/auth/spreadsheets"]


class SheetsClient:
    """Async client for the Sheets values API.

    Credentials are refreshed lazily in a worker thread because
    google-auth's refresh is blocking.

    Attributes:
        spreadsheet_id: Target spreadsheet ID.
        value_input_option: How written values are interpreted.
    """

    def __init__(
        self,
        settings: SheetsSettings,
        credentials: Any | None = None,
        http_client: httpx.AsyncClient | None = None,
    ) -> None:
        """Initialize the Sheets client.

        Args:
            settings: Sheets configuration.
            credentials: Optional pre-built google-auth credentials.
            http_client: Optional pre-built httpx client.
        """
        self._settings = settings
        self._credentials = credentials
        self._http = http_client
        self._owns_http = http_client is None
        self.spreadsheet_id = settings.spreadsheet_id
        self.value_input_option = settings.value_input_option

    async def connect(self) -> None:
        """Load credentials and open the HTTP connection pool.

        Raises:
            SheetsError: If the credentials cannot be loaded.
        """
        if self._credentials is None:
            self._credentials = self._load_credentials()

        if self._http is None:
            self._http = httpx.AsyncClient(
                timeout=httpx.Timeout(self._settings.timeout),
            )
            self._owns_http = True

        logger.info("Sheets client ready for spreadsheet %s", self.spreadsheet_id)

    async def close(self) -> None:
        """Close the HTTP connection pool if this client created it."""
        if self._http is not None and self._owns_http:
            await self._http.aclose()
        self._http = None

    def _load_credentials(self) -> Any:
        """Build service account credentials from settings.

        Returns:
            google-auth service account credentials.

        Raises:
            SheetsError: If the key material is missing or malformed.
        """
        try:
            if self._settings.credentials_path:
                return service_account.Credentials.from_service_account_file(
                    self._settings.credentials_path,
                    scopes=SHEETS_SCOPES,
                )

            return service_account.Credentials.from_service_account_info(
                {
                    "type": "service_account",
                    "client_email": self._settings.service_account_email,
                    "private_key": self._settings.private_key_pem,
                    "token_uri": self._settings.token_uri,
                },
                scopes=SHEETS_SCOPES,
            )
        except (ValueError, OSError) as e:
            raise SheetsError(
                "Failed to load service account credentials",
                details={"error_type": type(e).__name__},
            ) from e

    def _ensure_connected(self) -> httpx.AsyncClient:
        """Ensure the client is connected.

        Returns:
            The httpx client instance.

        Raises:
            RemoteUnavailableError: If not connected.
        """
        if self._http is None or self._credentials is None:
            raise RemoteUnavailableError("Sheets client not connected. Call connect() first.")
        return self._http

    async def _get_access_token(self) -> str:
        """Get a valid OAuth2 access token, refreshing it if needed.

        Raises:
            RemoteUnavailableError: If the token cannot be refreshed.
        """
        if not self._credentials.valid:
            try:
                loop = asyncio.get_running_loop()
                await loop.run_in_executor(None, self._credentials.refresh, Request())
            except GoogleAuthError as e:
                logger.error("Sheets credential refresh failed: %s", str(e))
                raise RemoteUnavailableError(
                    "Failed to refresh Sheets credentials",
                    details={"error_type": type(e).__name__},
                ) from e
        return self._credentials.token

    def _values_url(self, range_: str, suffix: str = "") -> str:
        """Build the values endpoint URL for an A1 range."""
        encoded = quote(range_, safe="")
        return f"{self._settings.api_base_url.rstrip('/')}/{self.spreadsheet_id}/values/{encoded}{suffix}"

    async def _request(
        self,
        method: str,
        url: str,
        params: dict[str, str] | None = None,
        payload: dict[str, Any] | None = None,
    ) -> dict[str, Any]:
        """Send one authenticated request to the Sheets API.

        Returns:
            Decoded JSON body, or an empty dict for empty responses.

        Raises:
            RemoteUnavailableError: On timeout, connection failure or non-2xx status.
        """
        http = self._ensure_connected()
        token = await self._get_access_token()
        headers = {
            "Authorization": f"Bearer {token}",
            "Accept": "application/json",
        }

        try:
            response = await http.request(
                method,
                url,
                params=params,
                json=payload,
                headers=headers,
            )
        except httpx.TimeoutException as e:
            logger.error("Sheets API timeout: %s %s", method, url)
            raise RemoteUnavailableError(
                "Sheets API request timed out",
                details={"error_type": type(e).__name__},
            ) from e
        except httpx.RequestError as e:
            logger.error("Sheets API connection error: %s", str(e))
            raise RemoteUnavailableError(
                "Failed to connect to Sheets API",
                details={"error_type": type(e).__name__},
            ) from e

        if response.status_code >= 400:
            logger.error(
                "Sheets API error (%d) for %s %s: %s",
                response.status_code,
                method,
                url,
                response.text[:500],
            )
            raise RemoteUnavailableError(
                "Sheets API returned an error",
                status_code=response.status_code,
                response_body=response.text,
            )

        if not response.content:
            return {}
        return response.json()

    async def read_range(self, range_: str) -> list[list[str]]:
        """Read a rectangular range.

        Args:
            range_: A1 range, e.g. "Courses!A:Z".

        Returns:
            Rows of cell text. Trailing empty cells are omitted by the API,
            so rows may be shorter than the header.
        """
        data = await self._request("GET", self._values_url(range_))
        rows = data.get("values") or []
        return [[str(cell) for cell in row] for row in rows]

    async def append_row(self, range_: str, values: list[str]) -> None:
        """Append one row after the last non-empty row of a range.

        Args:
            range_: A1 range of the table, e.g. "Courses!A:Z".
            values: Cell values in column order.
        """
        await self._request(
            "POST",
            self._values_url(range_, ":append"),
            params={
                "valueInputOption": self.value_input_option,
                "insertDataOption": "INSERT_ROWS",
            },
            payload={"majorDimension": "ROWS", "values": [values]},
        )
        logger.debug("Appended row to %s", range_)

    async def update_row(self, range_: str, values: list[str]) -> None:
        """Overwrite the cells of a single-row range.

        Args:
            range_: A1 range of one row, e.g. "Courses!A5:Z5".
            values: Cell values in column order.
        """
        await self._request(
            "PUT",
            self._values_url(range_),
            params={"valueInputOption": self.value_input_option},
            payload={"range": range_, "majorDimension": "ROWS", "values": [values]},
        )
        logger.debug("Updated range %s", range_)
