import logging
import uuid
from typing import Dict, Optional

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from pydantic import BaseModel
from starlette.middleware.base import BaseHTTPMiddleware
from starlette.requests import Request
from starlette.types import ASGIApp

from config import APP_NAME, CORS_ORIGINS
from evermore.db import is_supabase_configured, select_rows
from evermore.models import Collection
from logging_setup import setup_logging

# Ensure logging is configured when the app module is imported (e.g., under uvicorn)
setup_logging()

app = FastAPI(title=APP_NAME)


@app.on_event("startup")
async def startup_event():
    logging.info("Application startup event.")


@app.on_event("shutdown")
async def shutdown_event():
    logging.info("Application shutdown event.")


# Custom middleware to add request context to logger
class ProcessRequestMiddleware(BaseHTTPMiddleware):
    def __init__(self, app: ASGIApp):
        super().__init__(app)

    async def dispatch(self, request: Request, call_next):
        request_id = request.headers.get("x-request-id") or str(uuid.uuid4())
        request.state.request_id = request_id
        response = await call_next(request)
        # user and wedding are only known once the route's dependencies ran
        user_id = getattr(request.state, "user_id", None)
        wedding_id = getattr(request.state, "wedding_id", None)
        logging.info(
            f"request_id={request_id}, method={request.method}, path={request.url.path}, "
            f"status={response.status_code}, user_id={user_id}, wedding_id={wedding_id}"
        )
        response.headers["X-Request-Id"] = request_id
        return response


app.add_middleware(ProcessRequestMiddleware)

# CORS Middleware
app.add_middleware(
    CORSMiddleware,
    allow_origins=CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


class HealthCheckResult(BaseModel):
    status: str
    message: Optional[str] = None


class OverallHealthStatus(BaseModel):
    status: str
    checks: Dict[str, HealthCheckResult]


@app.get("/health", response_model=OverallHealthStatus, tags=["Health"])
async def health_check():
    application_status = HealthCheckResult(status="ok", message="Application is running")
    supabase_status = await check_supabase_health()

    all_checks = {
        "application": application_status,
        "supabase": supabase_status,
    }

    overall_status = "ok"
    if any(check.status == "unavailable" for check in all_checks.values()):
        overall_status = "unavailable"
    elif any(check.status == "degraded" for check in all_checks.values()):
        overall_status = "degraded"

    return OverallHealthStatus(status=overall_status, checks=all_checks)


async def check_supabase_health() -> HealthCheckResult:
    logging.debug("Checking Supabase health.")
    if not is_supabase_configured():
        logging.warning("Supabase URL or key not configured.")
        return HealthCheckResult(status="unavailable", message="Supabase is not configured")

    # Cheapest read that exercises the REST endpoint
    response = await select_rows(Collection.VENDORS, columns="id", limit=1)
    if response.get("status") == "success":
        logging.info("Supabase health check successful.")
        return HealthCheckResult(status="ok", message="Supabase record store is reachable")

    # Log the internal error but don't expose it in the response
    logging.warning(f"Supabase health query failed: {response.get('error', 'Unknown error')}")
    return HealthCheckResult(status="degraded", message="Supabase query execution failed")
