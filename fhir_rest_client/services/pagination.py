"""
Pagination over FHIR search sets.
"""

import inspect
from collections.abc import Awaitable, Callable, Mapping
from typing import Any, TypeVar, Union

from fhir_rest_client.config.logging import get_logger
from fhir_rest_client.constants import DEFAULT_MAX_PAGINATION_ITERATIONS, NEXT_LINK_RELATION
from fhir_rest_client.errors import (
    ConfigurationError,
    FHIRClientError,
    InvalidNextLinkError,
    MaxIterationsReachedError,
    NextPageError,
)
from fhir_rest_client.services.fhir_client import FHIRClient
from fhir_rest_client.services.options import at_url
from fhir_rest_client.services.targets import DecodeInto
from fhir_rest_client.utils import parse_absolute_url

logger = get_logger(__name__)

PageT = TypeVar("PageT")

ConsumeFunc = Callable[[PageT], Union[bool, Awaitable[bool]]]


def _get(value: Any, name: str) -> Any:
    if isinstance(value, Mapping):
        return value.get(name)
    return getattr(value, name, None)


def find_next_link(search_set: Any) -> str | None:
    """
    Return the URL of the 'next' link of a search set page, if any.

    When a page (incorrectly) carries several 'next' links, the last one wins.
    A 'next' link without a URL yields "", which is not a valid next link.
    """
    next_url = None
    for link in _get(search_set, "link") or []:
        if _get(link, "relation") == NEXT_LINK_RELATION:
            next_url = _get(link, "url") or ""
    return next_url


async def paginate(
    client: FHIRClient,
    search_set: PageT,
    consume: ConsumeFunc,
    *,
    max_iterations: int = DEFAULT_MAX_PAGINATION_ITERATIONS,
) -> None:
    """
    Scan through all pages of a FHIR search result.

    Calls `consume` for each page; it returns False to stop early (if for
    example enough data has been found). Pagination also stops when a page
    has no "next" link. Subsequent pages are decoded into the same type as
    the initial page (a dict or a Bundle model).

    To guard against endless loops caused by a server that keeps returning
    the same "next" link, pagination fails once the loop reaches iteration
    max_iterations - 1, so at most max_iterations - 1 pages are consumed.

    Args:
        client: Client used to fetch the following pages
        search_set: The first page, e.g. the result of client.search()
        consume: Sync or async callback receiving each page
        max_iterations: Iteration ceiling

    Raises:
        ConfigurationError: If max_iterations is not positive
        InvalidNextLinkError: If a "next" link is missing its URL or is not a valid absolute URL
        NextPageError: If fetching a following page fails
        MaxIterationsReachedError: If the iteration ceiling is reached
        Exception: Whatever `consume` raises, unchanged
    """
    if max_iterations < 1:
        raise ConfigurationError(
            f"max_iterations must be positive, got {max_iterations}",
            details={"max_iterations": max_iterations},
        )

    page = search_set
    for iteration in range(max_iterations):
        if iteration == max_iterations - 1:
            raise MaxIterationsReachedError(max_iterations)

        proceed = consume(page)
        if inspect.isawaitable(proceed):
            proceed = await proceed
        if not proceed:
            return

        next_link = find_next_link(page)
        if next_link is None:
            return
        try:
            next_url = parse_absolute_url(next_link)
        except ValueError as e:
            raise InvalidNextLinkError(next_link, e) from e

        logger.debug("Fetching search set page %d: %s", iteration + 2, next_url)
        try:
            page = await client.search("", None, at_url(next_url), target=DecodeInto(type(page)))
        except FHIRClientError as e:
            raise NextPageError(next_url, e) from e
