"""
Service wiring for the web layer.

build_services() assembles the production graph from settings; tests build a
Services with fakes instead and hand it to create_app().
"""

import logging
from dataclasses import dataclass

from fastapi import Depends, Request

from ..application.auth_service import AuthService
from ..application.avatar import AvatarFactory
from ..application.pin_service import PinService
from ..application.review_service import ReviewService
from ..application.submission_service import (
    ConfiguredIdResolver,
    ProductLookupResolver,
    ReviewScanResolver,
    SubmissionService,
)
from ..infrastructure.config import Settings
from ..infrastructure.gender import GenderService, InMemoryGenderCache
from ..infrastructure.judgeme import JudgeMeClient
from ..infrastructure.media import CloudinaryUploader
from ..infrastructure.persistence import (
    build_credential_store,
    build_pin_store,
    create_firestore_client,
)

logger = logging.getLogger(__name__)


@dataclass
class Services:
    settings: Settings
    reviews: ReviewService
    submissions: SubmissionService
    pins: PinService
    auth: AuthService


def build_services(settings: Settings) -> Services:
    firestore_client = create_firestore_client(settings.firebase)
    pin_store = build_pin_store(settings, firestore_client)
    credential_store = build_credential_store(settings, firestore_client)

    judgeme = JudgeMeClient(settings.judgeme)
    gender_service = GenderService(InMemoryGenderCache(), settings.gender)

    resolvers = [
        ReviewScanResolver(judgeme),
        ProductLookupResolver(judgeme),
        ConfiguredIdResolver(settings),
    ]

    logger.info(f"Storage backend: {'Firestore' if firestore_client else 'local files'}")

    return Services(
        settings=settings,
        reviews=ReviewService(judgeme, pin_store, AvatarFactory(gender_service)),
        submissions=SubmissionService(judgeme, CloudinaryUploader(settings.cloudinary), resolvers),
        pins=PinService(pin_store),
        auth=AuthService(credential_store, settings.auth),
    )


def get_services(request: Request) -> Services:
    return request.app.state.services


def bearer_token(request: Request):
    """Token part of an 'Authorization: Bearer <token>' header, or None."""
    parts = request.headers.get("authorization", "").split(" ")
    return parts[1] if len(parts) > 1 and parts[1] else None


def require_admin(request: Request, services: Services = Depends(get_services)) -> dict:
    """Reject requests without a valid admin token (401 missing, 403 invalid)."""
    return services.auth.verify_token(bearer_token(request))
