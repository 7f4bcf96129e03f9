# tests/conftest.py

import random

import pytest
from fastapi.testclient import TestClient

from review_proxy.application.auth_service import AuthService
from review_proxy.application.avatar import AvatarFactory
from review_proxy.application.pin_service import PinService
from review_proxy.application.review_service import ReviewService
from review_proxy.application.submission_service import (
    ConfiguredIdResolver,
    ProductLookupResolver,
    ReviewScanResolver,
    SubmissionService,
)
from review_proxy.infrastructure.config.settings import AuthSettings, Settings, StorageSettings
from review_proxy.web.app import create_app
from review_proxy.web.dependencies import Services

from fakes import (
    FakeGenderService,
    FakeJudgeMe,
    FakeUploader,
    MemoryCredentialStore,
    MemoryPinStore,
    make_review,
)


@pytest.fixture
def settings(tmp_path):
    return Settings(
        auth=AuthSettings(jwt_secret="test-secret"),
        storage=StorageSettings(
            config_dir=tmp_path / "config",
            public_dir=tmp_path / "public",
            ephemeral_filesystem=False,
        ),
        product_id_overrides={"PRODUCT_ID_VERSION_H1": "9972195066142"},
    )


@pytest.fixture
def judgeme():
    return FakeJudgeMe(
        reviews=[
            make_review(1, rating=5),
            make_review(2, rating=4, reviewer={"name": "Maria Lopez"}),
            make_review(3, rating=3),
            make_review(4, rating=1, handle="other-product"),
            make_review(5, rating=2, published=False),
        ]
    )


@pytest.fixture
def pin_store():
    return MemoryPinStore()


@pytest.fixture
def credential_store():
    return MemoryCredentialStore()


@pytest.fixture
def uploader():
    return FakeUploader()


@pytest.fixture
def gender_service():
    return FakeGenderService({"maria": "female"})


@pytest.fixture
def services(settings, judgeme, pin_store, credential_store, uploader, gender_service):
    resolvers = [ReviewScanResolver(judgeme), ProductLookupResolver(judgeme), ConfiguredIdResolver(settings)]
    return Services(
        settings=settings,
        reviews=ReviewService(judgeme, pin_store, AvatarFactory(gender_service, random.Random(7))),
        submissions=SubmissionService(judgeme, uploader, resolvers),
        pins=PinService(pin_store),
        auth=AuthService(credential_store, settings.auth),
    )


@pytest.fixture
def client(services):
    return TestClient(create_app(services))
