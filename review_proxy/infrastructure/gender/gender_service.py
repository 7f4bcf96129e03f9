"""
Gender Service - First-Name Gender Inference
=============================================

ARCHITECTURAL DECISION:
- Uses genderize.io (free, no key) to pick an avatar style per reviewer
- Strict timeout; any failure falls back to the default gender
- Every answer, fallback included, is cached for the life of the process,
  so a name is looked up at most once

EXTENSIBILITY:
- To share the cache between workers: implement GenderCache on Redis
- To use another provider: change api_url in settings and _parse_gender
"""

import logging
from abc import ABC, abstractmethod
from typing import Dict, Optional

import requests

from ..config import get_settings
from ..config.settings import GenderSettings

logger = logging.getLogger(__name__)


class GenderCache(ABC):
    """Lowercase first name -> inferred gender."""

    @abstractmethod
    def get(self, name: str) -> Optional[str]:
        ...

    @abstractmethod
    def set(self, name: str, gender: str) -> None:
        ...


class InMemoryGenderCache(GenderCache):
    """Process-lifetime dict cache. Never evicted, never persisted."""

    def __init__(self):
        self._entries: Dict[str, str] = {}

    def get(self, name: str) -> Optional[str]:
        return self._entries.get(name)

    def set(self, name: str, gender: str) -> None:
        self._entries[name] = gender

    def __len__(self) -> int:
        return len(self._entries)


class GenderService:
    """
    Cached gender lookup.

    USAGE:
        service = GenderService()
        service.detect("Maria")  # "female"
        service.detect("maria")  # cached, no HTTP call

    FALLBACK BEHAVIOR:
    - Timeout or HTTP error: default gender (cached)
    - Unknown name (gender null): default gender (cached)
    """

    def __init__(
        self,
        cache: Optional[GenderCache] = None,
        settings: Optional[GenderSettings] = None,
        session: Optional[requests.Session] = None,
    ):
        self._cache = cache if cache is not None else InMemoryGenderCache()
        self._settings = settings or get_settings().gender
        self._session = session or requests.Session()

    def detect(self, first_name: str) -> str:
        """
        Infer gender from a first name.

        Returns:
            "male" or "female" (provider values are passed through).
        """
        name = (first_name or "").strip().lower()
        if not name:
            return self._settings.default_gender

        cached = self._cache.get(name)
        if cached:
            return cached

        gender = self._lookup(name) or self._settings.default_gender
        self._cache.set(name, gender)
        return gender

    def _lookup(self, name: str) -> Optional[str]:
        try:
            response = self._session.get(
                self._settings.api_url,
                params={"name": name},
                timeout=self._settings.timeout_seconds,
            )
            response.raise_for_status()
            return self._parse_gender(response.json())

        except requests.Timeout:
            logger.debug(f"Gender lookup timed out for '{name}', using default")
            return None

        except requests.RequestException as e:
            logger.debug(f"Gender lookup failed for '{name}': {e}, using default")
            return None

        except ValueError:
            logger.debug(f"Gender lookup returned invalid JSON for '{name}'")
            return None

    def _parse_gender(self, data: dict) -> Optional[str]:
        if not isinstance(data, dict):
            return None
        gender = data.get("gender")
        return gender if isinstance(gender, str) and gender else None
