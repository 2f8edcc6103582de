"""Cursor pagination over Stripe list endpoints.

Stripe list endpoints return `{"object": "list", "data": [...], "has_more": ...}`;
the next page is requested with `starting_after=<id of the last item>`.

Usage example:
    from stripe_request_core.resources.refunds import ListRefund

    for refund in ListRefund().limit(100).paginate().iter_items(client):
        print(refund.id, refund.amount)
"""

from __future__ import annotations

from collections.abc import AsyncIterator, Iterator, Mapping
from dataclasses import replace
from typing import TYPE_CHECKING, Generic, TypeVar

from pydantic import BaseModel, ConfigDict

from ..domain.retry_policy import RetryPolicy
from ..observability import get_logger
from ..types import RequestDescription

if TYPE_CHECKING:
    from ..client import AsyncStripeClient, StripeClient

ItemT = TypeVar("ItemT")

logger = get_logger("stripe_request_core.pagination")

_CURSOR_PARAM = "starting_after"


class StripeList(BaseModel, Generic[ItemT]):
    """One page of a Stripe list response."""

    model_config = ConfigDict(extra="ignore")

    object: str = "list"
    data: list[ItemT]
    has_more: bool = False
    url: str | None = None


def _item_id(item: object) -> str | None:
    if isinstance(item, Mapping):
        value = item.get("id")
    else:
        value = getattr(item, "id", None)
    return value if isinstance(value, str) and value else None


def _with_cursor(description: RequestDescription, cursor: str) -> RequestDescription:
    query = tuple(pair for pair in description.query if pair[0] != _CURSOR_PARAM)
    return replace(description, query=query).query_params({_CURSOR_PARAM: cursor})


class ListPaginator(Generic[ItemT]):
    """Walks every page of a list endpoint, one request at a time."""

    def __init__(self, description: RequestDescription, item_type: type[ItemT]) -> None:
        self.description = description
        self.item_type = item_type

    def _next_description(self, page: StripeList[ItemT]) -> RequestDescription | None:
        if not page.has_more or not page.data:
            return None
        cursor = _item_id(page.data[-1])
        if cursor is None:
            logger.warning("List page has more items but the last item has no id; stopping.")
            return None
        return _with_cursor(self.description, cursor)

    def iter_pages(
        self, client: StripeClient, policy: RetryPolicy | None = None
    ) -> Iterator[StripeList[ItemT]]:
        description: RequestDescription | None = self.description
        while description is not None:
            page = client.execute(description, StripeList[self.item_type], policy)
            yield page
            description = self._next_description(page)

    def iter_items(self, client: StripeClient, policy: RetryPolicy | None = None) -> Iterator[ItemT]:
        for page in self.iter_pages(client, policy):
            yield from page.data

    async def aiter_pages(
        self, client: AsyncStripeClient, policy: RetryPolicy | None = None
    ) -> AsyncIterator[StripeList[ItemT]]:
        description: RequestDescription | None = self.description
        while description is not None:
            page = await client.execute(description, StripeList[self.item_type], policy)
            yield page
            description = self._next_description(page)

    async def aiter_items(
        self, client: AsyncStripeClient, policy: RetryPolicy | None = None
    ) -> AsyncIterator[ItemT]:
        async for page in self.aiter_pages(client, policy):
            for item in page.data:
                yield item
