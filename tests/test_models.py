import pytest

from qas.exceptions import InvalidRequest
from qas.models.quote import Quote, QuotesRequest


def test_quote_coerces_numeric_id_and_ignores_unknown_fields() -> None:
    quote = Quote.model_validate(
        {
            "id": 4287,
            "body": "Be yourself; everyone else is already taken.",
            "author": "Oscar Wilde",
            "tags": ["honesty", "inspirational"],
            "favorites_count": 3,
            "qotd_date": "2024-01-01",
        }
    )

    assert quote.id == "4287"
    assert quote.tags == ["honesty", "inspirational"]
    assert quote.upvotes_count == 0


def test_quote_is_immutable() -> None:
    quote = Quote(id="1", body="text")

    with pytest.raises(Exception):
        quote.body = "changed"  # type: ignore[misc]


def test_quote_null_tags_become_empty() -> None:
    assert Quote.model_validate({"id": 1, "tags": None}).tags == []


def test_request_defaults() -> None:
    request = QuotesRequest.create(count=10)

    assert request.page == 1
    assert request.page_size == 25
    assert request.tag is None
    assert request.is_tagged is False


@pytest.mark.parametrize(
    ("kwargs", "field"),
    [
        ({"count": 0}, "count"),
        ({"count": 5, "page": 0}, "page"),
        ({"count": 5, "page_size": 0}, "page_size"),
        ({"count": 5, "page_size": 51}, "page_size"),
        ({"count": 5, "tag": "   "}, "tag"),
        ({"count": "5"}, "count"),
    ],
)
def test_request_rejects_invalid_fields(kwargs: dict, field: str) -> None:
    with pytest.raises(InvalidRequest) as exc_info:
        QuotesRequest.create(**kwargs)

    assert exc_info.value.field == field


def test_request_strips_tag() -> None:
    assert QuotesRequest.create(count=3, tag="  love ").tag == "love"
