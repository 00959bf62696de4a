"""Structured cache keys for the batch and aggregate tiers."""

from urllib.parse import quote

from pydantic import BaseModel, ConfigDict

from qas.core.constants import APIConstants, QuoteFilter

KEY_PREFIX = "quotes"


def _scope(tag: str | None) -> str:
    # Tags are percent-encoded so a tag can never mimic the random scope or a separator
    return QuoteFilter.RANDOM.value if tag is None else f"{QuoteFilter.TAG.value}={quote(tag, safe='')}"


class BatchKey(BaseModel):
    """Identifies one upstream batch.

    Random batches are told apart by their fan-out index since the provider
    does not paginate random results. Tagged batches are keyed by the real
    upstream page number.
    """

    model_config = ConfigDict(frozen=True)

    page_size: int
    tag: str | None = None
    position: int

    @classmethod
    def for_index(cls, index: int, page_size: int, tag: str | None = None) -> "BatchKey":
        """Key for the ``index``-th batch (0-based) of a fan-out."""
        position = index + 1 if tag is not None else index
        return cls(page_size=page_size, tag=tag, position=position)

    @property
    def upstream_page(self) -> int:
        """Page number to send to the provider."""
        return self.position if self.tag is not None else APIConstants.RANDOM_PAGE

    def render(self) -> str:
        label = "page" if self.tag is not None else "index"
        return f"{KEY_PREFIX}:batch:{_scope(self.tag)}:size={self.page_size}:{label}={self.position}"

    def __str__(self) -> str:
        return self.render()


class AggregateKey(BaseModel):
    """Identifies the deduplicated result for one ``(count, page_size, tag)``."""

    model_config = ConfigDict(frozen=True)

    count: int
    page_size: int
    tag: str | None = None

    def render(self) -> str:
        return f"{KEY_PREFIX}:aggregate:{_scope(self.tag)}:size={self.page_size}:count={self.count}"

    def __str__(self) -> str:
        return self.render()
