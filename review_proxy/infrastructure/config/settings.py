"""
Settings Module - Centralized Configuration Management
=======================================================

ARCHITECTURAL DECISION:
- All configuration is loaded from environment variables (no hardcoded secrets)
- Settings are immutable dataclasses, grouped per external integration
- Single source of truth for all configurable values

ENVIRONMENT:
- Judge.me:    JUDGE_ME_API_TOKEN (or J_API_TOKEN), SHOP_DOMAIN (or J_SHOP_DOMAIN)
- Cloudinary:  CLOUDINARY_CLOUD_NAME, CLOUDINARY_API_KEY, CLOUDINARY_API_SECRET
- Firestore:   FIREBASE_SERVICE_ACCOUNT (inline JSON) or config/service-account.json
- Auth:        JWT_SECRET
- Products:    PRODUCT_ID_<HANDLE> numeric id overrides
"""

import os
import re
from dataclasses import dataclass, field
from typing import Dict, Optional
from pathlib import Path
from functools import lru_cache

from dotenv import load_dotenv

load_dotenv()

PROJECT_ROOT = Path(__file__).resolve().parents[3]

PRODUCT_ID_PREFIX = "PRODUCT_ID_"


def _env(*names: str, default: str = "") -> str:
    """Return the first non-empty environment variable among `names`."""
    for name in names:
        value = os.getenv(name)
        if value:
            return value
    return default


def clean_shop_domain(domain: str) -> str:
    """Strip scheme and trailing slashes: 'https://shop.com/' -> 'shop.com'."""
    return domain.replace("https://", "").replace("http://", "").strip("/")


def product_id_env_key(handle: str) -> str:
    """Environment key holding the numeric product id for a handle."""
    return PRODUCT_ID_PREFIX + re.sub(r"[^A-Z0-9]", "_", handle.upper())


def _load_product_id_overrides() -> Dict[str, str]:
    return {
        key: value
        for key, value in os.environ.items()
        if key.startswith(PRODUCT_ID_PREFIX) and value
    }


@dataclass(frozen=True)
class JudgeMeSettings:
    """Judge.me review API settings."""

    api_token: str = field(
        default_factory=lambda: _env("JUDGE_ME_API_TOKEN", "J_API_TOKEN")
    )
    shop_domain: str = field(
        default_factory=lambda: clean_shop_domain(_env("SHOP_DOMAIN", "J_SHOP_DOMAIN"))
    )
    api_url: str = "https://judge.me/api/v1"

    # Safety limit: 10 pages of 100 reviews
    per_page: int = 100
    max_pages: int = 10

    timeout_seconds: int = 15


@dataclass(frozen=True)
class CloudinarySettings:
    """Cloudinary media host credentials."""

    cloud_name: str = field(default_factory=lambda: os.getenv("CLOUDINARY_CLOUD_NAME", ""))
    api_key: str = field(default_factory=lambda: os.getenv("CLOUDINARY_API_KEY", ""))
    api_secret: str = field(default_factory=lambda: os.getenv("CLOUDINARY_API_SECRET", ""))
    folder: str = "armor_reviews"

    @property
    def configured(self) -> bool:
        return bool(self.cloud_name and self.api_key and self.api_secret)


@dataclass(frozen=True)
class FirebaseSettings:
    """Firestore service account, inline JSON or a local file."""

    service_account_json: str = field(
        default_factory=lambda: os.getenv("FIREBASE_SERVICE_ACCOUNT", "")
    )
    service_account_file: Path = field(
        default_factory=lambda: PROJECT_ROOT / "config" / "service-account.json"
    )


@dataclass(frozen=True)
class AuthSettings:
    """Admin login and token signing."""

    jwt_secret: str = field(
        default_factory=lambda: os.getenv("JWT_SECRET", "your-secret-key-change-in-production")
    )
    jwt_algorithm: str = "HS256"
    token_ttl_hours: int = 24

    default_username: str = "admin"
    default_password: str = "admin123"


@dataclass(frozen=True)
class GenderSettings:
    """genderize.io lookup used for avatar decoration."""

    api_url: str = "https://api.genderize.io/"
    # Bounds the latency avatars add to /api/product-reviews
    timeout_seconds: float = 0.5
    default_gender: str = "male"


@dataclass(frozen=True)
class StorageSettings:
    """Local file fallback used when Firestore is not configured."""

    config_dir: Path = field(default_factory=lambda: PROJECT_ROOT / "config")
    pinned_file_name: str = "pinned_reviews.json"
    users_file_name: str = "users.json"
    public_dir: Path = field(default_factory=lambda: PROJECT_ROOT / "public")

    # Serverless deployments have no durable local filesystem
    ephemeral_filesystem: bool = field(default_factory=lambda: bool(os.getenv("VERCEL")))

    @property
    def pinned_file(self) -> Path:
        return self.config_dir / self.pinned_file_name

    @property
    def users_file(self) -> Path:
        return self.config_dir / self.users_file_name


@dataclass(frozen=True)
class Settings:
    """
    Root settings container - Single source of truth for all configuration.

    Usage:
        from review_proxy.infrastructure.config import get_settings
        settings = get_settings()
        print(settings.judgeme.shop_domain)
    """

    judgeme: JudgeMeSettings = field(default_factory=JudgeMeSettings)
    cloudinary: CloudinarySettings = field(default_factory=CloudinarySettings)
    firebase: FirebaseSettings = field(default_factory=FirebaseSettings)
    auth: AuthSettings = field(default_factory=AuthSettings)
    gender: GenderSettings = field(default_factory=GenderSettings)
    storage: StorageSettings = field(default_factory=StorageSettings)

    product_id_overrides: Dict[str, str] = field(default_factory=_load_product_id_overrides)

    def product_id_for(self, handle: str) -> Optional[str]:
        """Configured numeric product id for a handle, if any."""
        return self.product_id_overrides.get(product_id_env_key(handle))

    def validate(self) -> list[str]:
        """
        Validate settings and return list of warnings.
        Returns empty list if all settings are valid.
        """
        issues = []

        if not self.judgeme.api_token:
            issues.append("WARNING: JUDGE_ME_API_TOKEN not set. Review fetches will fail.")

        if not self.judgeme.shop_domain:
            issues.append("WARNING: SHOP_DOMAIN not set. Review fetches will fail.")

        if not self.cloudinary.configured:
            issues.append(
                "WARNING: Cloudinary credentials incomplete. "
                "Review images will not be uploaded."
            )

        if "change-in-production" in self.auth.jwt_secret:
            issues.append("WARNING: JWT_SECRET not set. Using the insecure default secret.")

        if self.storage.ephemeral_filesystem and not self.firebase.service_account_json:
            issues.append(
                "WARNING: Running serverless without Firebase. "
                "Pinned reviews and credentials will NOT persist."
            )

        return issues


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    """
    Get singleton Settings instance.
    Cached to ensure consistent settings throughout application lifecycle.
    """
    return Settings()
