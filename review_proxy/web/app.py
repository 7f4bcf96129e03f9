"""
FastAPI Web Application - Review Proxy API
==========================================

Public JSON API used by the storefront review widget and the admin page:

    POST /api/login            admin login, returns a JWT
    GET  /api/verify-token     checks an admin token
    GET  /api/product-reviews  reviews + stats for ?handle=
    POST /api/toggle-pin       pin / unpin a review
    POST /api/submit-review    forward a new review to Judge.me
"""

import logging
from contextlib import asynccontextmanager
from typing import Any, List, Optional, Union

from fastapi import Depends, FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import FileResponse, JSONResponse, PlainTextResponse
from pydantic import BaseModel

from ..application.submission_service import ReviewSubmission, sanitize_ip
from ..errors import (
    AuthError,
    UpstreamError,
    UpstreamSubmitError,
    ValidationError,
)
from ..infrastructure.config import get_settings
from .dependencies import Services, build_services, get_services, require_admin

logging.basicConfig(level=logging.INFO)
logger = logging.getLogger(__name__)


# ── Request bodies ─────────────────────────────────────────────────

class LoginRequest(BaseModel):
    username: Optional[str] = None
    password: Optional[str] = None


class TogglePinRequest(BaseModel):
    id: Optional[Union[int, str]] = None
    action: Optional[str] = None


class SubmitReviewRequest(BaseModel):
    name: Optional[str] = None
    email: Optional[str] = None
    rating: Optional[Union[int, str]] = None
    title: Optional[str] = None
    body: Optional[str] = None
    handle: Optional[str] = None
    product_handle: Optional[str] = None
    pictures: Optional[List[Any]] = None


# ── App factory ────────────────────────────────────────────────────

def create_app(services: Optional[Services] = None) -> FastAPI:
    """
    Build the API. Without `services` the production graph is assembled from
    settings at startup.
    """

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        if app.state.services is None:
            settings = get_settings()
            for issue in settings.validate():
                logger.warning(issue)
            app.state.services = build_services(settings)
        logger.info("Review proxy ready")
        yield

    app = FastAPI(
        title="Review Proxy",
        description="Judge.me review aggregation and submission",
        lifespan=lifespan,
    )
    app.state.services = services

    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_methods=["*"],
        allow_headers=["*"],
    )

    _register_error_handlers(app)
    _register_routes(app)
    return app


def _register_error_handlers(app: FastAPI) -> None:

    @app.exception_handler(ValidationError)
    async def validation_error_handler(request: Request, exc: ValidationError):
        return JSONResponse(status_code=400, content={"error": exc.message})

    @app.exception_handler(RequestValidationError)
    async def request_validation_handler(request: Request, exc: RequestValidationError):
        return JSONResponse(
            status_code=400,
            content={"error": "Invalid request body", "details": jsonable_errors(exc)},
        )

    @app.exception_handler(AuthError)
    async def auth_error_handler(request: Request, exc: AuthError):
        return JSONResponse(status_code=exc.status_code, content={"error": exc.message})

    @app.exception_handler(UpstreamError)
    async def upstream_error_handler(request: Request, exc: UpstreamError):
        content = {"error": exc.message, "details": exc.detail}
        if isinstance(exc, UpstreamSubmitError):
            content["debug_urls"] = exc.uploaded_urls
        return JSONResponse(status_code=502, content=content)

    @app.exception_handler(Exception)
    async def unhandled_error_handler(request: Request, exc: Exception):
        logger.exception(f"Unhandled error on {request.url.path}: {exc}")
        return JSONResponse(
            status_code=500,
            content={"error": "Internal Server Error", "message": str(exc), "path": request.url.path},
        )


def jsonable_errors(exc: RequestValidationError) -> list:
    return [
        {"loc": list(error.get("loc", [])), "msg": error.get("msg", "")}
        for error in exc.errors()
    ]


def _register_routes(app: FastAPI) -> None:

    @app.get("/")
    def login_page(services: Services = Depends(get_services)):
        login_file = services.settings.storage.public_dir / "login.html"
        if login_file.exists():
            return FileResponse(login_file)
        return PlainTextResponse("Login page not found. Ensure public folder exists at root.", status_code=404)

    @app.post("/api/login")
    def login(payload: LoginRequest, services: Services = Depends(get_services)):
        return services.auth.login(payload.username, payload.password)

    @app.get("/api/verify-token")
    def verify_token(claims: dict = Depends(require_admin)):
        return {"valid": True, "username": claims.get("username")}

    @app.get("/api/product-reviews")
    def product_reviews(handle: Optional[str] = None, services: Services = Depends(get_services)):
        return services.reviews.get_reviews_for_handle(handle)

    @app.post("/api/toggle-pin")
    def toggle_pin(payload: TogglePinRequest, services: Services = Depends(get_services)):
        pinned_ids = services.pins.toggle(payload.id, payload.action)
        return {"status": "success", "pinned_ids": pinned_ids}

    @app.post("/api/submit-review")
    def submit_review(
        payload: SubmitReviewRequest,
        request: Request,
        services: Services = Depends(get_services),
    ):
        submission = ReviewSubmission(
            name=payload.name,
            email=payload.email,
            rating=payload.rating,
            title=payload.title,
            body=payload.body,
            handle=payload.product_handle or payload.handle,
            pictures=payload.pictures or [],
            ip_addr=sanitize_ip(
                request.headers.get("x-forwarded-for"),
                request.client.host if request.client else None,
            ),
        )
        return services.submissions.submit_review(submission)


app = create_app()
