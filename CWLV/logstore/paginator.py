"""
Paginated Fetcher Module - Drives token-continuation listings to completion

Handles:
- Repeated page requests, feeding each continuation token into the next call
- Flattening all pages into one collection in page order
- All-or-nothing failure semantics (no partial results)
"""
import logging
from typing import Awaitable, Callable, List, Optional, TypeVar

from .errors import FetchFailed
from .models import Page

T = TypeVar("T")

PageRequest = Callable[[Optional[str]], Page[T]]
AsyncPageRequest = Callable[[Optional[str]], Awaitable[Page[T]]]


class PaginatedFetcher:
    """
    Aggregates a paged listing into a single list

    The fetcher holds no state between calls; each collect starts from a
    fresh first page. It never retries, a failed page fails the whole
    aggregation with FetchFailed and the pages already read are dropped.
    """

    def __init__(self):
        self.logger = logging.getLogger(__name__)

    def collect(self, request_page: PageRequest) -> List[T]:
        """
        Fetch every page with a blocking page function

        Args:
            request_page: Called with None first, then with each next_token

        Returns:
            Items of all pages, in page order

        Raises:
            FetchFailed: if any page request fails
        """
        items: List[T] = []
        token: Optional[str] = None
        pages = 0
        while True:
            try:
                page = request_page(token)
            except Exception as e:
                self.logger.warning(f"Page {pages + 1} failed after {len(items)} items: {e}")
                raise FetchFailed(e) from e
            pages += 1
            items.extend(page.items)
            token = page.next_token
            if not token:
                break
        self.logger.debug(f"Collected {len(items)} items over {pages} page(s)")
        return items

    async def acollect(self, request_page: AsyncPageRequest) -> List[T]:
        """
        Fetch every page with a coroutine page function

        Same contract as collect(); the only suspension points are the
        page requests themselves.
        """
        items: List[T] = []
        token: Optional[str] = None
        pages = 0
        while True:
            try:
                page = await request_page(token)
            except Exception as e:
                self.logger.warning(f"Page {pages + 1} failed after {len(items)} items: {e}")
                raise FetchFailed(e) from e
            pages += 1
            items.extend(page.items)
            token = page.next_token
            if not token:
                break
        self.logger.debug(f"Collected {len(items)} items over {pages} page(s)")
        return items
