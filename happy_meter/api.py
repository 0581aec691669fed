"""FastAPI application exposing the Happy Meter REST API."""

from __future__ import annotations

import logging
import sqlite3
from typing import Any, Dict, Optional

from fastapi import Body, Depends, FastAPI, Header, HTTPException, Query, Request, Response, status
from fastapi.concurrency import run_in_threadpool
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from pydantic import BaseModel

from .auth import CredentialVerifier, SharedSecretVerifier, bearer_token
from .config import Settings, load_settings
from .db import Database
from .mailer import MailerError, SmtpMailer
from .models import DEPARTMENTS, QUESTIONS, SCORE_LABELS
from .service import HappyMeterService, Mailer, SubmissionError

logger = logging.getLogger("happy_meter")


class SubmissionIn(BaseModel):
    name: Optional[str] = None
    department: Optional[str] = None
    scores: Optional[Dict[str, Any]] = None
    feedback: Optional[str] = None


class LoginIn(BaseModel):
    password: str = ""


def describe_validation_error(exc: RequestValidationError) -> str:
    """Render the first validation error as ``field: reason``."""

    errors = exc.errors()
    if not errors:
        return "Invalid request"
    first = errors[0]
    if first.get("type") == "json_invalid":
        return "request body is not valid JSON"
    field = ".".join(
        str(part) for part in first.get("loc", ()) if part not in ("body", "query", "header")
    )
    reason = first.get("msg", "invalid value")
    return f"{field}: {reason}" if field else reason


def build_mailer(settings: Settings) -> SmtpMailer:
    return SmtpMailer(
        settings.smtp_host,
        settings.smtp_port,
        username=settings.smtp_username,
        password=settings.smtp_password,
        use_tls=settings.smtp_use_tls,
        timeout=settings.smtp_timeout,
    )


def create_app(
    settings: Optional[Settings] = None,
    *,
    database: Optional[Database] = None,
    mailer: Optional[Mailer] = None,
    cron_verifier: Optional[CredentialVerifier] = None,
    admin_verifier: Optional[CredentialVerifier] = None,
    service: Optional[HappyMeterService] = None,
) -> FastAPI:
    settings = settings or load_settings()
    if service is None:
        database = database or Database(settings.database_path, timeout=settings.db_timeout)
        service = HappyMeterService(settings, database, mailer or build_mailer(settings))
    verify_cron = cron_verifier or SharedSecretVerifier(settings.cron_secret)
    verify_admin = admin_verifier or SharedSecretVerifier(settings.admin_password)

    app = FastAPI(title="Happy Meter API", version="1.0.0")
    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_methods=["*"],
        allow_headers=["*"],
    )

    @app.exception_handler(RequestValidationError)
    async def validation_error_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
        return JSONResponse(
            status_code=status.HTTP_400_BAD_REQUEST,
            content={"success": False, "message": describe_validation_error(exc)},
        )

    async def verify_cron_token(authorization: Optional[str] = Header(None)) -> None:
        if not verify_cron(bearer_token(authorization)):
            logger.warning("Rejected weekly report trigger with invalid credentials")
            raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Unauthorized")

    def get_service() -> HappyMeterService:
        return service

    @app.get("/healthz")
    async def healthcheck() -> dict[str, str]:
        return {"status": "ok"}

    @app.get("/api/questions")
    async def questions() -> dict[str, object]:
        return {
            "departments": list(DEPARTMENTS),
            "questions": [
                {"id": q.id, "text": q.text, "category": q.category} for q in QUESTIONS
            ],
            "scale": [{"value": value, "label": label} for value, label in SCORE_LABELS.items()],
        }

    @app.post("/api/submit", status_code=status.HTTP_201_CREATED)
    async def submit(
        body: SubmissionIn = Body(...),
        svc: HappyMeterService = Depends(get_service),
    ) -> Any:
        try:
            record = svc.submit(body.model_dump())
        except SubmissionError as exc:
            return JSONResponse(
                status_code=status.HTTP_400_BAD_REQUEST,
                content={"success": False, "message": str(exc)},
            )
        except sqlite3.Error:
            logger.exception("Failed to store submission")
            return JSONResponse(
                status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
                content={"success": False, "message": "Server Error"},
            )
        return {"success": True, "id": record.id}

    @app.get("/api/admin/stats")
    async def admin_stats(svc: HappyMeterService = Depends(get_service)) -> Any:
        try:
            snapshot = svc.get_stats()
        except sqlite3.Error:
            logger.exception("Stats query failed")
            return JSONResponse(
                status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
                content={"error": "Failed to fetch"},
            )
        return snapshot.to_dict()

    @app.post("/api/admin/login")
    async def admin_login(body: LoginIn = Body(...)) -> dict[str, bool]:
        if not verify_admin(body.password):
            raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Invalid password")
        return {"success": True}

    @app.get("/api/admin/export")
    async def admin_export(
        days: Optional[int] = Query(None, ge=1),
        x_admin_password: Optional[str] = Header(None),
        svc: HappyMeterService = Depends(get_service),
    ) -> Response:
        if not verify_admin(x_admin_password or ""):
            raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Invalid password")
        try:
            document = svc.export_csv(days)
        except sqlite3.Error:
            logger.exception("CSV export failed")
            return JSONResponse(
                status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
                content={"error": "Failed to export"},
            )
        return Response(
            content=document,
            media_type="text/csv",
            headers={"Content-Disposition": 'attachment; filename="Mood_Report.csv"'},
        )

    @app.get("/api/cron/weekly-report", dependencies=[Depends(verify_cron_token)])
    async def weekly_report(svc: HappyMeterService = Depends(get_service)) -> Any:
        try:
            result = await run_in_threadpool(svc.generate_weekly_report)
        except (sqlite3.Error, MailerError):
            logger.exception("Weekly report failed")
            return JSONResponse(
                status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
                content={"success": False, "error": "Failed to send report"},
            )
        if result.skipped:
            return {"success": True, "message": "skipped", "count": 0}
        return {"success": True, "count": result.count}

    return app


__all__ = ["create_app", "build_mailer", "describe_validation_error"]
