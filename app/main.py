from __future__ import annotations

from typing import Any, Dict, Optional

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
import logging
from pydantic import BaseModel, ConfigDict, Field

from config.settings import get_settings
from migrator.relay import RelayError, run_migration


settings = get_settings()

logging.basicConfig(
    level=getattr(logging, settings.log_level.upper(), logging.INFO),
    format="[%(asctime)s] %(levelname)s - %(message)s",
)
logger = logging.getLogger("codemigrate")

app = FastAPI(title="CodeMigrate AI Relay", version="1.0.0")

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_allow_origins or ["*"],
    allow_methods=["POST", "GET", "OPTIONS"],
    allow_headers=["authorization", "x-client-info", "apikey", "content-type"],
)


MISSING_FIELDS_MESSAGE = "Missing required fields: code and targetFormat"


class MigrateRequest(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    code: Optional[str] = Field(None, description="Legacy JavaScript source")
    target_format: Optional[str] = Field(
        None,
        alias="targetFormat",
        description="'es6' or 'typescript'",
    )


def _error(status_code: int, message: str) -> JSONResponse:
    return JSONResponse(status_code=status_code, content={"error": message})


@app.exception_handler(RequestValidationError)
async def _invalid_body(request: Request, exc: RequestValidationError) -> JSONResponse:
    logger.warning("Rejected malformed request body: %s", exc.errors())
    return _error(400, "Invalid request body")


@app.post("/migrate-code")
def migrate_code(req: MigrateRequest):
    if not req.code or not req.target_format:
        return _error(400, MISSING_FIELDS_MESSAGE)

    settings = get_settings()
    try:
        logger.info(
            "Config: provider=%s key_set=%s",
            settings.ai_provider,
            bool(settings.provider_key),
        )
        migrated = run_migration(req.code, req.target_format, settings=settings)
    except RelayError as exc:
        logger.warning("Migration rejected (%s): %s", exc.status_code, exc.message)
        return _error(exc.status_code, exc.message)
    except Exception as e:
        logger.exception("Error in migrate-code handler: %s", e)
        return _error(500, str(e) or "Unknown error")

    response_body: Dict[str, Any] = {"migratedCode": migrated}
    return response_body


@app.get("/health")
def health():
    return {"status": "ok"}
