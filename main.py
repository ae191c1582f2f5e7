import logging
from contextlib import asynccontextmanager
from pathlib import Path
from typing import Optional

import httpx
from dotenv import load_dotenv
from fastapi import FastAPI, Request
from fastapi.staticfiles import StaticFiles
from starlette.exceptions import HTTPException as StarletteHTTPException

from airtable import AirtableClient
from config import ServerSettings, UpstreamConfig
from handler import SubmissionResult, SubmitEndpoint, handle_submission

logger = logging.getLogger(__name__)


class LandingPages(StaticFiles):
    """Static landing pages from the project root, minus dotfiles like .env."""

    async def get_response(self, path: str, scope):
        if any(part.startswith(".") for part in Path(path).parts):
            raise StarletteHTTPException(status_code=404)
        return await super().get_response(path, scope)


def create_app(
    config: Optional[UpstreamConfig] = None,
    settings: Optional[ServerSettings] = None,
    transport: Optional[httpx.AsyncBaseTransport] = None,
) -> FastAPI:
    """Build the server app. Configuration is read once, here."""
    if config is None:
        config = UpstreamConfig.from_env()
    if settings is None:
        settings = ServerSettings.from_env()

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        if not config.is_complete:
            logger.warning("AIRTABLE_TOKEN or AIRTABLE_BASE_ID not set; /api/submit will fail")
        async with AirtableClient(transport=transport) as client:
            app.state.airtable = client
            logger.info("Server running at http://localhost:%s", settings.port)
            yield

    app = FastAPI(title="Lead Relay", lifespan=lifespan)

    async def submit(request: Request) -> SubmissionResult:
        """Forward a landing page form to Airtable."""
        return await handle_submission(
            request.method,
            await request.body(),
            request.headers.get("origin"),
            config,
            request.app.state.airtable,
        )

    # Every method reaches the handler, so unsupported ones still get CORS headers
    app.add_route("/api/submit", SubmitEndpoint(submit))

    @app.get("/api/health")
    def health():
        return {"status": "ok", "airtable_configured": config.is_complete}

    # Mounted last so the API routes above take precedence
    if settings.static_dir.is_dir():
        app.mount("/", LandingPages(directory=settings.static_dir, html=True), name="landing")
    else:
        logger.warning("Static directory %s not found; serving API only", settings.static_dir)

    return app


load_dotenv()
SETTINGS = ServerSettings.from_env()
logging.basicConfig(
    level=SETTINGS.log_level,
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
)

app = create_app(settings=SETTINGS)


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(app, host=SETTINGS.host, port=SETTINGS.port)
