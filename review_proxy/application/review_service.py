"""
Review Service - Product Review Aggregation
===========================================

Turns the raw Judge.me review list into what the storefront widget shows for
one product: published reviews for the handle, each with media, author,
pin state and an avatar, plus rating statistics.

Review order is the upstream order.
"""

import logging
from typing import Any, Dict, Iterable, List, Optional

from .avatar import AvatarFactory
from ..errors import ValidationError

logger = logging.getLogger(__name__)

VERIFIED_STATUSES = {"buyer", "verified_buyer", "email"}
DEFAULT_RATING = 5
SAMPLE_HANDLE_COUNT = 10


def handle_matches(review: Dict[str, Any], handle: str) -> bool:
    return str(review.get("product_handle")).lower() == str(handle).lower()


def is_published(review: Dict[str, Any]) -> bool:
    # Any one of the three publication flags is enough.
    return (
        review.get("published") is True
        or review.get("curated") == "ok"
        or review.get("hidden") is False
    )


def extract_media(review: Dict[str, Any]) -> List[Dict[str, str]]:
    media = []
    for picture in review.get("pictures") or []:
        if isinstance(picture, str):
            image_url = picture
        elif isinstance(picture, dict):
            urls = picture.get("urls")
            image_url = (
                (urls.get("original") if isinstance(urls, dict) else None)
                or picture.get("image_url")
                or picture.get("url")
            )
        else:
            image_url = None
        if image_url:
            media.append({"type": "image", "url": image_url})
    return media


def author_name(review: Dict[str, Any]) -> str:
    reviewer = review.get("reviewer") or {}
    name = reviewer.get("name") or review.get("name") or "Anonymous"
    if not str(name).strip():
        return "Verified Buyer"
    return str(name)


def parse_rating(value: Any) -> int:
    """Integer rating clamped to 1-5; missing or unparseable means 5."""
    if value is None or value == "":
        return DEFAULT_RATING
    try:
        rating = int(float(value))
    except (TypeError, ValueError):
        return DEFAULT_RATING
    return min(max(rating, 1), 5)


def compute_stats(ratings: Iterable[int]) -> Dict[str, Any]:
    """
    Aggregate rating statistics.

    Returns:
        {"average": "4.0", "count": 3, "distribution": {1: 0, ..., 5: 1}}
    """
    ratings = list(ratings)
    count = len(ratings)
    average = f"{sum(ratings) / count:.1f}" if count else "0.0"

    distribution = {star: 0 for star in range(1, 6)}
    for rating in ratings:
        distribution[rating] = distribution.get(rating, 0) + 1

    return {"average": average, "count": count, "distribution": distribution}


class ReviewService:
    """
    Review aggregation for one product handle.

    USAGE:
        service = ReviewService(judgeme_client, pin_store, avatar_factory)
        result = service.get_reviews_for_handle("version-h1")
        result["stats"]["average"]  # "4.4"
    """

    def __init__(self, review_source, pin_store, avatar_factory: AvatarFactory):
        self._review_source = review_source
        self._pin_store = pin_store
        self._avatars = avatar_factory

    def get_reviews_for_handle(self, handle: Optional[str]) -> Dict[str, Any]:
        if not handle:
            raise ValidationError("Missing handle")

        pinned_ids = self._pin_store.load()
        raw_reviews = self._review_source.fetch_all_reviews()

        logger.info(f"Stats for handle '{handle}': {len(raw_reviews)} total shop reviews")

        filtered = []
        for review in raw_reviews:
            if not handle_matches(review, handle):
                product_handle = review.get("product_handle")
                if product_handle and handle in str(product_handle):
                    logger.debug(f"Partial handle match: '{product_handle}' vs '{handle}'")
                continue
            if is_published(review):
                filtered.append(review)

        logger.info(f"Filtered reviews (handle match & published): {len(filtered)}")

        sample_handles = list(dict.fromkeys(r.get("product_handle") for r in raw_reviews))[:SAMPLE_HANDLE_COUNT]

        reviews = [self._decorate(review, pinned_ids) for review in filtered]

        stats = compute_stats(r["rating"] for r in reviews)
        stats["debug"] = {
            "total_shop_reviews": len(raw_reviews),
            "filtered_matching_handle": len(filtered),
            "sample_handles": sample_handles,
        }
        return {"stats": stats, "reviews": reviews}

    def _decorate(self, review: Dict[str, Any], pinned_ids) -> Dict[str, Any]:
        review_id = review.get("id")
        author = author_name(review)
        rating = parse_rating(review.get("rating"))
        avatar = self._avatars.build(review_id, author, rating)

        return {
            "id": review_id,
            "body": review.get("body"),
            "rating": rating,
            "author": author,
            "profile_pic": avatar.url,
            "is_pinned": review_id in pinned_ids,
            "is_verified": review.get("verified") in VERIFIED_STATUSES,
            "media": extract_media(review),
            "title": review.get("title"),
            "date": review.get("created_at"),
        }
