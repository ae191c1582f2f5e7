"""
Configuration for the lead relay.

All settings are read from environment variables (a local .env file is
loaded by the server shell). NO SECRETS ARE STORED IN CODE.
"""

import os
from pathlib import Path
from typing import Mapping, Optional

from pydantic import BaseModel, Field

PROJECT_ROOT = Path(__file__).resolve().parent

DEFAULT_TABLE_NAME = "Leads"
DEFAULT_PORT = 3000


class UpstreamConfig(BaseModel):
    """Airtable credentials and target table."""
    token: str = Field("", repr=False)
    base_id: str = ""
    table_name: str = DEFAULT_TABLE_NAME

    @property
    def is_complete(self) -> bool:
        return bool(self.token and self.base_id)

    @classmethod
    def from_env(cls, environ: Optional[Mapping[str, str]] = None) -> "UpstreamConfig":
        env = os.environ if environ is None else environ
        return cls(
            token=env.get("AIRTABLE_TOKEN", ""),
            base_id=env.get("AIRTABLE_BASE_ID", ""),
            table_name=env.get("AIRTABLE_TABLE_NAME") or DEFAULT_TABLE_NAME,
        )


class ServerSettings(BaseModel):
    """Settings for the always-on server shell only."""
    host: str = "0.0.0.0"
    port: int = DEFAULT_PORT
    static_dir: Path = PROJECT_ROOT
    log_level: str = "INFO"

    @classmethod
    def from_env(cls, environ: Optional[Mapping[str, str]] = None) -> "ServerSettings":
        env = os.environ if environ is None else environ
        return cls(
            host=env.get("HOST") or "0.0.0.0",
            port=int(env.get("PORT") or DEFAULT_PORT),
            static_dir=Path(env.get("STATIC_DIR") or PROJECT_ROOT),
            log_level=(env.get("LOG_LEVEL") or "INFO").upper(),
        )
