# tests/test_submission_service.py

import pytest

from review_proxy.application.submission_service import (
    ConfiguredIdResolver,
    ProductLookupResolver,
    ReviewScanResolver,
    ReviewSubmission,
    SubmissionService,
    resolve_product_id,
    sanitize_ip,
)
from review_proxy.errors import UpstreamFetchError, UpstreamSubmitError, ValidationError
from review_proxy.infrastructure.config.settings import Settings

from fakes import FakeJudgeMe, FakeUploader, make_review


def submission(**overrides):
    data = dict(
        name="Ana Ruiz",
        email="ana@example.com",
        rating="4",
        title="Great",
        body="Fits well",
        handle="version-h1",
        pictures=["https://cdn.example.com/a.jpg"],
        ip_addr="203.0.113.9",
    )
    data.update(overrides)
    return ReviewSubmission(**data)


def build(judgeme, overrides=None, uploader=None):
    settings = Settings(product_id_overrides=overrides or {})
    resolvers = [ReviewScanResolver(judgeme), ProductLookupResolver(judgeme), ConfiguredIdResolver(settings)]
    return SubmissionService(judgeme, uploader or FakeUploader(), resolvers)


def test_payload_follows_judgeme_schema():
    judgeme = FakeJudgeMe(reviews=[make_review(1, product_external_id=111)])

    result = build(judgeme).submit_review(submission())

    payload = judgeme.submitted[0]
    assert payload == {
        "shop_domain": "armor-test.myshopify.com",
        "platform": "shopify",
        "name": "Ana Ruiz",
        "email": "ana@example.com",
        "rating": 4,
        "body": "Fits well",
        "id": 111,
        "title": "Great",
        "picture_urls": {"img_00000000.jpg": "https://res.cloudinary.com/demo/0.jpg"},
        "reviewer_name_format": "",
        "ip_addr": "203.0.113.9",
    }
    assert result["status"] == "success"
    assert result["message"] == "Review created"
    assert result["review"] == {"id": 999}
    assert result["uploaded_images"] == ["https://res.cloudinary.com/demo/0.jpg"]
    assert result["is_processing"] is True


def test_missing_title_and_body_default_to_empty():
    judgeme = FakeJudgeMe(reviews=[make_review(1)])

    build(judgeme).submit_review(submission(title=None, body=None, pictures=[]))

    assert judgeme.submitted[0]["title"] == ""
    assert judgeme.submitted[0]["body"] == ""
    assert judgeme.submitted[0]["picture_urls"] == {}


def test_failed_uploads_are_dropped():
    uploader = FakeUploader(fail_sources={"bad"})
    judgeme = FakeJudgeMe(reviews=[make_review(1)])

    result = build(judgeme, uploader=uploader).submit_review(submission(pictures=["bad", "good"]))

    assert result["uploaded_images"] == ["https://res.cloudinary.com/demo/1.jpg"]


@pytest.mark.parametrize("field", ["email", "name", "rating", "handle"])
def test_required_fields(field):
    judgeme = FakeJudgeMe()

    with pytest.raises(ValidationError):
        build(judgeme).submit_review(submission(**{field: None}))
    assert judgeme.submitted == []


def test_non_numeric_rating_is_rejected():
    with pytest.raises(ValidationError):
        build(FakeJudgeMe()).submit_review(submission(rating="five"))


def test_unresolvable_handle_submits_null_id():
    judgeme = FakeJudgeMe(reviews=[make_review(1, handle="something-else")])

    result = build(judgeme).submit_review(submission(handle="mystery-product"))

    assert result["status"] == "success"
    assert judgeme.submitted[0]["id"] is None
    assert judgeme.lookups == ["mystery-product"]


def test_product_lookup_used_when_reviews_have_no_id():
    judgeme = FakeJudgeMe(reviews=[make_review(1, product_external_id=None)], product_id="222")

    build(judgeme).submit_review(submission())

    assert judgeme.submitted[0]["id"] == 222


def test_configured_id_used_last():
    judgeme = FakeJudgeMe(fetch_error=UpstreamFetchError("down"))

    build(judgeme, overrides={"PRODUCT_ID_VERSION_H1": "333"}).submit_review(submission())

    assert judgeme.submitted[0]["id"] == 333
    assert judgeme.lookups == ["version-h1"]


def test_upstream_rejection_carries_uploaded_urls():
    judgeme = FakeJudgeMe(
        reviews=[make_review(1)],
        submit_error=UpstreamSubmitError("Judge.me API rejected images or review", detail={"error": "bad id"}),
    )

    with pytest.raises(UpstreamSubmitError) as excinfo:
        build(judgeme).submit_review(submission())

    assert excinfo.value.detail == {"error": "bad id"}
    assert excinfo.value.uploaded_urls == ["https://res.cloudinary.com/demo/0.jpg"]


def test_resolver_chain_stops_at_first_hit():
    calls = []

    def first(handle):
        calls.append("first")
        return None

    def second(handle):
        calls.append("second")
        return "44"

    def third(handle):
        calls.append("third")
        return "55"

    assert resolve_product_id("h", [first, second, third]) == 44
    assert calls == ["first", "second"]


def test_non_numeric_resolver_result_is_skipped():
    assert resolve_product_id("h", [lambda h: "not-a-number", lambda h: 7]) == 7


def test_configured_resolver_sanitizes_handle():
    settings = Settings(product_id_overrides={"PRODUCT_ID_MY_COOL_ITEM_2": "9"})

    assert ConfiguredIdResolver(settings)("my-cool.item-2") == "9"


@pytest.mark.parametrize(
    "forwarded,remote,expected",
    [
        ("198.51.100.7, 10.0.0.1", "10.0.0.2", "198.51.100.7"),
        (None, "::ffff:192.0.2.1", "192.0.2.1"),
        ("::ffff:192.0.2.5", None, "192.0.2.5"),
        (None, None, "127.0.0.1"),
    ],
)
def test_sanitize_ip(forwarded, remote, expected):
    assert sanitize_ip(forwarded, remote) == expected
