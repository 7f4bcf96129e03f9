"""
Judge.me Client - Review Source and Submission API
===================================================

ARCHITECTURAL DECISION:
- Thin wrapper around the public Judge.me REST API (v1)
- Returns raw review dicts; reshaping belongs to the application layer
- Review fetches fail loudly (UpstreamFetchError), product lookups fail quietly

PAGINATION:
- 100 reviews per page, at most 10 pages (1000 reviews)
- Stops at the first short page
"""

import logging
import time
from typing import Any, Dict, List, Optional

import requests

from ..config import get_settings
from ..config.settings import JudgeMeSettings
from ...errors import UpstreamFetchError, UpstreamSubmitError

logger = logging.getLogger(__name__)


def _error_detail(error: requests.RequestException) -> Any:
    """Upstream error payload: JSON body if there is one, else the error text."""
    response = error.response
    if response is not None:
        try:
            return response.json()
        except ValueError:
            return response.text or str(error)
    return str(error)


def _error_message(detail: Any, default: str) -> str:
    if isinstance(detail, dict) and detail.get("message"):
        return str(detail["message"])
    return default


class JudgeMeClient:
    """
    Judge.me API client.

    USAGE:
        client = JudgeMeClient()
        reviews = client.fetch_all_reviews()
        product_id = client.find_product_external_id("version-h1")
    """

    def __init__(
        self,
        settings: Optional[JudgeMeSettings] = None,
        session: Optional[requests.Session] = None,
    ):
        self._settings = settings or get_settings().judgeme
        self._session = session or requests.Session()

    @property
    def shop_domain(self) -> str:
        return self._settings.shop_domain

    def _auth_params(self) -> Dict[str, str]:
        return {
            "api_token": self._settings.api_token,
            "shop_domain": self._settings.shop_domain,
        }

    def fetch_all_reviews(self) -> List[Dict[str, Any]]:
        """
        Fetch every shop review, page by page.

        Raises:
            UpstreamFetchError: on any HTTP or network failure. Nothing
                fetched so far is returned in that case.
        """
        all_reviews: List[Dict[str, Any]] = []
        per_page = self._settings.per_page

        logger.info("Fetching all shop reviews...")
        for page in range(1, self._settings.max_pages + 1):
            params = {
                **self._auth_params(),
                "page": page,
                "per_page": per_page,
                "_": int(time.time() * 1000),  # cache buster
            }
            try:
                response = self._session.get(
                    f"{self._settings.api_url}/reviews",
                    params=params,
                    timeout=self._settings.timeout_seconds,
                )
                response.raise_for_status()
                data = response.json()
            except requests.RequestException as e:
                detail = _error_detail(e)
                logger.error(f"Judge.me API error on page {page}: {detail}")
                raise UpstreamFetchError(
                    _error_message(detail, "Failed to fetch reviews from Judge.me"),
                    detail=detail,
                ) from e
            except ValueError as e:
                logger.error(f"Judge.me returned invalid JSON on page {page}")
                raise UpstreamFetchError(
                    "Failed to fetch reviews from Judge.me", detail=str(e)
                ) from e

            if not isinstance(data, dict):
                logger.error(f"Judge.me returned an unexpected body on page {page}: {data!r}")
                raise UpstreamFetchError("Failed to fetch reviews from Judge.me", detail=data)
            reviews = data.get("reviews") or []

            if page == 1 and reviews:
                sample = reviews[0]
                logger.info(
                    f"Sample review product info: handle={sample.get('product_handle')} "
                    f"id={sample.get('product_id')} external_id={sample.get('product_external_id')}"
                )
            logger.info(f"Page {page}: found {len(reviews)} reviews")
            all_reviews.extend(reviews)

            if len(reviews) < per_page:
                logger.info("Reached end of reviews list")
                break

        return all_reviews

    def find_product_external_id(self, handle: str) -> Optional[Any]:
        """
        Look a product up by handle through the "-1 id" products endpoint.

        Returns:
            The product's external (Shopify) id, or None if not found or
            the lookup failed.
        """
        params = {**self._auth_params(), "handle": handle}
        try:
            response = self._session.get(
                f"{self._settings.api_url}/products/-1",
                params=params,
                timeout=self._settings.timeout_seconds,
            )
            response.raise_for_status()
            data = response.json()
        except requests.RequestException as e:
            logger.warning(f"Products API lookup failed for {handle}: {e}")
            return None
        except ValueError:
            logger.warning(f"Products API returned invalid JSON for {handle}")
            return None

        product = data.get("product") if isinstance(data, dict) else None
        if not product:
            return None
        return product.get("external_id")

    def submit_review(self, payload: Dict[str, Any]) -> Dict[str, Any]:
        """
        Post a new review.

        Raises:
            UpstreamSubmitError: when Judge.me rejects the review.
        """
        try:
            response = self._session.post(
                f"{self._settings.api_url}/reviews",
                params={"api_token": self._settings.api_token},
                json=payload,
                timeout=self._settings.timeout_seconds,
            )
            response.raise_for_status()
        except requests.RequestException as e:
            detail = _error_detail(e)
            logger.error(f"Judge.me rejected review: {detail}")
            raise UpstreamSubmitError("Judge.me API rejected images or review", detail=detail) from e

        try:
            data = response.json()
        except ValueError:
            data = {}
        logger.info(f"Judge.me response: {data}")
        return data if isinstance(data, dict) else {}
