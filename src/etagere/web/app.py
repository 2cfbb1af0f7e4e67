"""FastAPI web application for Etagere."""

from __future__ import annotations

import os
from datetime import datetime, timezone

import httpx
import structlog
import uvicorn
from dotenv import load_dotenv
from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse

from ..core.config import VERSION, Settings
from ..core.enrich import translate_description
from ..core.errors import InvalidIsbn, NotFound
from ..core.resolver import resolve_isbn

load_dotenv()

log = structlog.get_logger()

app = FastAPI(title="Etagere", docs_url=None, redoc_url=None)


@app.middleware("http")
async def security_headers(request: Request, call_next):
    response = await call_next(request)
    response.headers["X-Content-Type-Options"] = "nosniff"
    response.headers["X-Frame-Options"] = "DENY"
    response.headers["Referrer-Policy"] = "strict-origin-when-cross-origin"
    return response


@app.get("/health")
async def health():
    return {
        "status": "ok",
        "timestamp": datetime.now(timezone.utc).isoformat(),
        "version": VERSION,
        "environment": os.environ.get("ENV", "dev"),
    }


@app.get("/api/isbn")
async def lookup_isbn(isbn: str = "", lang: str = ""):
    settings = Settings.from_env()
    try:
        record = await resolve_isbn(isbn, lang or None, settings=settings)
    except InvalidIsbn:
        return JSONResponse({"error": "missing isbn"}, status_code=400)
    except NotFound:
        return JSONResponse({"error": "not_found"}, status_code=404)
    except Exception as e:
        log.exception("isbn_lookup_failed", isbn=isbn)
        return JSONResponse({"error": str(e) or "failed"}, status_code=500)
    return record.to_payload()


@app.post("/api/translate")
async def translate(request: Request):
    try:
        body = await request.json()
    except ValueError:
        return JSONResponse({"error": "invalid JSON body"}, status_code=400)
    if not isinstance(body, dict):
        return JSONResponse({"error": "invalid JSON body"}, status_code=400)

    text = body.get("text") or ""
    if not isinstance(text, str) or not text.strip():
        return {"text": ""}

    settings = Settings.from_env()
    target = body.get("target") or settings.target_language
    async with httpx.AsyncClient() as client:
        translated = await translate_description(client, text, target, settings)
    return {"text": translated}


def main():
    port = int(os.environ.get("PORT", "8000"))
    is_dev = os.environ.get("ENV", "dev") == "dev"
    uvicorn.run(
        "etagere.web.app:app",
        host="0.0.0.0",
        port=port,
        reload=is_dev,
    )
