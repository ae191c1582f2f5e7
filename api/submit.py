"""
Serverless entry point for POST /api/submit.

The platform imports `app` (ASGI) on demand; configuration is read from the
environment on every invocation and nothing outlives the request.
"""

import logging
import os

from fastapi import FastAPI, Request

from airtable import AirtableClient
from config import UpstreamConfig
from handler import SubmissionResult, SubmitEndpoint, handle_submission

logging.basicConfig(
    level=os.environ.get("LOG_LEVEL", "INFO").upper(),
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
)


async def submit(request: Request) -> SubmissionResult:
    config = UpstreamConfig.from_env()
    async with AirtableClient() as client:
        return await handle_submission(
            request.method,
            await request.body(),
            request.headers.get("origin"),
            config,
            client,
        )


app = FastAPI(title="Lead Relay (serverless)")
app.add_route("/api/submit", SubmitEndpoint(submit))
