"""Thin async client for the Airtable record-creation endpoint."""

from typing import Dict, Optional
from urllib.parse import quote

import httpx

from config import UpstreamConfig

AIRTABLE_API = "https://api.airtable.com/v0"
DEFAULT_TIMEOUT = 30.0

# Characters encodeURIComponent leaves alone, besides alphanumerics and "-_."
_PATH_SEGMENT_SAFE = "!~*'()"


def record_url(config: UpstreamConfig) -> str:
    table = quote(config.table_name, safe=_PATH_SEGMENT_SAFE)
    return f"{AIRTABLE_API}/{config.base_id}/{table}"


class AirtableClient:
    """
    Creates records in an Airtable table.

    One instance can be shared by concurrent requests; it owns a pooled
    httpx.AsyncClient which is released by aclose(). Pass a transport
    (e.g. httpx.MockTransport) to talk to something other than the network.
    """

    def __init__(self, transport: Optional[httpx.AsyncBaseTransport] = None, timeout: float = DEFAULT_TIMEOUT):
        self.http_client = httpx.AsyncClient(transport=transport, timeout=timeout)

    async def create_record(self, config: UpstreamConfig, fields: Dict[str, str]) -> httpx.Response:
        """POST one record. Transport failures surface as httpx.HTTPError."""
        return await self.http_client.post(
            record_url(config),
            headers={
                "Authorization": f"Bearer {config.token}",
                "Content-Type": "application/json",
            },
            json={"fields": fields},
        )

    async def aclose(self) -> None:
        await self.http_client.aclose()

    async def __aenter__(self) -> "AirtableClient":
        return self

    async def __aexit__(self, *exc_info) -> None:
        await self.aclose()
