"""
Submission handler shared by the server and serverless shells.

handle_submission() turns one inbound request into at most one Airtable
write and exactly one response. It holds no state: the outcome depends only
on the request, the UpstreamConfig and the AirtableClient passed in.
"""

import json
import logging
from dataclasses import dataclass, field
from typing import Any, Awaitable, Callable, Dict, Mapping, Optional, Union

import httpx
from fastapi import Request
from fastapi.responses import JSONResponse, Response
from starlette.types import Receive, Scope, Send

from airtable import AirtableClient
from config import UpstreamConfig
from schemas import ErrorResponse, LeadSubmission, OkResponse

logger = logging.getLogger(__name__)

RawBody = Union[None, bytes, str, Mapping[str, Any]]


class SubmissionError(Exception):
    """A terminal failure; message is safe to show the caller."""
    status_code = 500
    message = "Internal server error"

    def __init__(self, status_code: Optional[int] = None, message: Optional[str] = None):
        if status_code is not None:
            self.status_code = status_code
        if message is not None:
            self.message = message
        super().__init__(self.message)


class ConfigurationError(SubmissionError):
    status_code = 500
    message = "Server configuration error"


class ClientInputError(SubmissionError):
    status_code = 400
    message = "Invalid JSON body"


class MethodNotAllowedError(SubmissionError):
    status_code = 405
    message = "Method not allowed"


class UpstreamTransportError(SubmissionError):
    status_code = 502
    message = "Failed to save lead"


class UpstreamRejectionError(SubmissionError):
    """Carries the upstream status code through to the caller."""
    message = "Failed to save lead"


@dataclass
class SubmissionResult:
    status_code: int
    body: Optional[Dict[str, Any]] = None
    headers: Dict[str, str] = field(default_factory=dict)

    def as_response(self) -> Response:
        if self.body is None:
            return Response(status_code=self.status_code, headers=self.headers)
        return JSONResponse(status_code=self.status_code, content=self.body, headers=self.headers)


def cors_headers(origin: Optional[str]) -> Dict[str, str]:
    # Any origin is echoed back; there is no allow-list
    return {
        "Access-Control-Allow-Origin": origin or "*",
        "Access-Control-Allow-Methods": "POST, OPTIONS",
        "Access-Control-Allow-Headers": "Content-Type",
    }


def _reject_constant(name: str) -> Any:
    # NaN / Infinity / -Infinity are not JSON
    raise ValueError(f"invalid JSON constant {name}")


def parse_body(body: RawBody) -> Mapping[str, Any]:
    """Accept a decoded mapping or JSON text; an empty body is an empty form."""
    if isinstance(body, (bytes, bytearray)):
        try:
            body = body.decode("utf-8")
        except UnicodeDecodeError as exc:
            raise ClientInputError() from exc
    if body is None or (isinstance(body, str) and not body.strip()):
        return {}
    if isinstance(body, str):
        try:
            body = json.loads(body, parse_constant=_reject_constant)
        except ValueError as exc:
            raise ClientInputError() from exc
    if not isinstance(body, Mapping):
        raise ClientInputError()
    return body


async def save_lead(fields: Dict[str, str], config: UpstreamConfig, client: AirtableClient) -> None:
    try:
        response = await client.create_record(config, fields)
    except httpx.HTTPError as exc:
        logger.error("Request error: %r", exc)
        raise UpstreamTransportError() from exc

    if not response.is_success:
        logger.error("Airtable error %s %s", response.status_code, response.text)
        raise UpstreamRejectionError(status_code=response.status_code)

    logger.info("Lead saved to %s (%s)", config.table_name, ", ".join(fields) or "no fields")


async def handle_submission(
    method: str,
    body: RawBody,
    origin: Optional[str],
    config: UpstreamConfig,
    client: AirtableClient,
) -> SubmissionResult:
    headers = cors_headers(origin)
    method = (method or "").upper()

    if method == "OPTIONS":
        return SubmissionResult(status_code=204, headers=headers)

    try:
        if method != "POST":
            raise MethodNotAllowedError()

        if not config.is_complete:
            logger.error("Missing AIRTABLE_TOKEN or AIRTABLE_BASE_ID")
            raise ConfigurationError()

        lead = LeadSubmission.model_validate(parse_body(body))
        await save_lead(lead.to_fields(), config, client)
    except SubmissionError as exc:
        error = ErrorResponse(error=exc.message)
        return SubmissionResult(status_code=exc.status_code, body=error.model_dump(), headers=headers)

    return SubmissionResult(status_code=200, body=OkResponse().model_dump(), headers=headers)


class SubmitEndpoint:
    """
    Raw ASGI endpoint for /api/submit.

    Registered without a method filter so that every HTTP method, including
    HEAD and non-standard ones, reaches handle_submission() and gets the
    CORS headers. `respond` maps a Request to a SubmissionResult.
    """

    def __init__(self, respond: Callable[[Request], Awaitable[SubmissionResult]]):
        self.respond = respond

    async def __call__(self, scope: Scope, receive: Receive, send: Send) -> None:
        result = await self.respond(Request(scope, receive))
        await result.as_response()(scope, receive, send)
