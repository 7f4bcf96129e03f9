"""
Submission Service - Forward New Reviews to Judge.me
====================================================

Steps for one submission:
1. Upload the pictures to Cloudinary (parallel, failures dropped)
2. Resolve the numeric Shopify product id for the handle
3. Build the payload in Judge.me's documented review schema
4. Post it

PRODUCT ID RESOLUTION:
An ordered chain of resolvers, each returning an id or None; the first id
wins. Default chain:
- ReviewScanResolver:       an existing review of the product carries it
- ProductLookupResolver:    Judge.me products endpoint, by handle
- ConfiguredIdResolver:     PRODUCT_ID_<HANDLE> environment override
If nothing resolves, the review is sent with id null and Judge.me decides.
"""

import logging
from dataclasses import dataclass, field
from typing import Any, Callable, Dict, List, Optional, Sequence

from ..errors import UpstreamError, UpstreamSubmitError, ValidationError

logger = logging.getLogger(__name__)

IPV4_MAPPED_PREFIX = "::ffff:"
DEFAULT_IP = "127.0.0.1"


@dataclass
class ReviewSubmission:
    """A review as posted by the storefront form."""
    name: Optional[str] = None
    email: Optional[str] = None
    rating: Any = None
    title: Optional[str] = None
    body: Optional[str] = None
    handle: Optional[str] = None
    pictures: List[Any] = field(default_factory=list)
    ip_addr: str = DEFAULT_IP


def sanitize_ip(forwarded_for: Optional[str], remote_addr: Optional[str]) -> str:
    """First X-Forwarded-For entry (or the peer address), IPv4-mapped prefix removed."""
    ip = forwarded_for or remote_addr or DEFAULT_IP
    ip = ip.split(",")[0].strip()
    if ip.startswith(IPV4_MAPPED_PREFIX):
        ip = ip[len(IPV4_MAPPED_PREFIX):]
    return ip or DEFAULT_IP


def to_product_id(value: Any) -> Optional[int]:
    """Judge.me wants the id as a number; anything non-numeric becomes None."""
    if value is None or value == "":
        return None
    try:
        return int(value)
    except (TypeError, ValueError):
        logger.warning(f"Ignoring non-numeric product id: {value!r}")
        return None


# ── Product id resolvers ───────────────────────────────────────────

ProductIdResolver = Callable[[str], Optional[Any]]


class ReviewScanResolver:
    """Find the id on an already published review of the same product."""

    def __init__(self, review_source):
        self._review_source = review_source

    def __call__(self, handle: str) -> Optional[Any]:
        try:
            reviews = self._review_source.fetch_all_reviews()
        except UpstreamError as e:
            logger.warning(f"Review scan failed ({e.message}), trying next resolver")
            return None

        for review in reviews:
            if (
                str(review.get("product_handle")).lower() == handle.lower()
                and review.get("product_external_id")
            ):
                logger.info(f"Found numeric id {review['product_external_id']} in shop reviews")
                return review["product_external_id"]
        return None


class ProductLookupResolver:
    """Ask the Judge.me products endpoint."""

    def __init__(self, client):
        self._client = client

    def __call__(self, handle: str) -> Optional[Any]:
        logger.info(f"Querying Products API for handle: {handle}")
        product_id = self._client.find_product_external_id(handle)
        if product_id:
            logger.info(f"Found numeric id {product_id} via Products API")
        return product_id


class ConfiguredIdResolver:
    """PRODUCT_ID_<HANDLE> overrides from settings."""

    def __init__(self, settings):
        self._settings = settings

    def __call__(self, handle: str) -> Optional[Any]:
        product_id = self._settings.product_id_for(handle)
        if product_id:
            logger.info(f"Found numeric id {product_id} in configuration")
        return product_id


def resolve_product_id(handle: str, resolvers: Sequence[ProductIdResolver]) -> Optional[int]:
    """Run the resolvers left to right; first numeric id wins."""
    for resolver in resolvers:
        product_id = to_product_id(resolver(handle))
        if product_id is not None:
            return product_id
    logger.warning(f"No product id resolved for handle '{handle}', submitting with null id")
    return None


# ── Service ────────────────────────────────────────────────────────

class SubmissionService:
    """
    USAGE:
        service = SubmissionService(client, uploader, resolvers)
        result = service.submit_review(ReviewSubmission(name="Ana", ...))
    """

    def __init__(self, client, uploader, resolvers: Sequence[ProductIdResolver]):
        self._client = client
        self._uploader = uploader
        self._resolvers = list(resolvers)

    def submit_review(self, submission: ReviewSubmission) -> Dict[str, Any]:
        rating = self._validate(submission)

        picture_urls = self._uploader.upload_many(submission.pictures or [])
        uploaded_images = list(picture_urls.values())

        product_id = resolve_product_id(submission.handle, self._resolvers)

        payload = {
            "shop_domain": self._client.shop_domain,
            "platform": "shopify",
            "name": submission.name,
            "email": submission.email,
            "rating": rating,
            "body": submission.body or "",
            "id": product_id,
            "title": submission.title or "",
            "picture_urls": picture_urls,
            "reviewer_name_format": "",
            "ip_addr": submission.ip_addr,
        }

        logger.info(f"Submitting review for '{submission.handle}' (product id {product_id})")
        try:
            response = self._client.submit_review(payload)
        except UpstreamSubmitError as e:
            raise UpstreamSubmitError(e.message, detail=e.detail, uploaded_urls=uploaded_images) from e

        return {
            "status": "success",
            "message": response.get("message") or "Review submitted successfully",
            "review": response.get("review"),
            "uploaded_images": uploaded_images,
            # Judge.me fetches pictures asynchronously
            "is_processing": True,
        }

    def _validate(self, submission: ReviewSubmission) -> int:
        if not submission.email or not submission.name or not submission.rating or not submission.handle:
            raise ValidationError("Missing required fields")
        try:
            return int(submission.rating)
        except (TypeError, ValueError):
            raise ValidationError("Rating must be a whole number")
