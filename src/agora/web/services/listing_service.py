"""Paginated, soft-delete aware listings over posts and comments."""

import logging
from typing import Any, Optional

from agora.pagination import PageRequest, PageResult, rank_to_page
from agora.storage.base import ForumStore
from agora.storage.filters import Ordering, ScopeFilter

logger = logging.getLogger(__name__)


class EntityNotLocatable(LookupError):
    """The target of a page lookup is not among the scope's active rows."""


class ListingService:
    """Computes page windows and page positions over a ForumStore.

    Stateless: every call re-queries the store and never writes to it.
    ``list`` and ``locate_page`` resolve the ordering the same way, so
    the page reported for an entity is the page it is listed on.
    """

    def __init__(self, store: ForumStore) -> None:
        self._store = store

    def list(
        self,
        scope: ScopeFilter,
        page_request: PageRequest,
        ordering: Optional[Ordering] = None,
    ) -> PageResult[dict[str, Any]]:
        """One window of the scope's active rows plus the scope's total.

        The count and the window are two independent reads and may
        disagree by a row if a write lands in between.
        """
        ordering = ordering or scope.default_ordering
        total = self._store.count(scope)
        items = self._store.fetch_page(
            scope,
            ordering,
            offset=page_request.offset,
            limit=page_request.limit,
        )
        return PageResult(
            items=items,
            total=total,
            page=page_request.page,
            limit=page_request.limit,
        )

    def locate_page(
        self,
        scope: ScopeFilter,
        target_id: int,
        page_limit: int,
        ordering: Optional[Ordering] = None,
    ) -> int:
        """Page on which ``target_id`` appears when listing ``scope``.

        Returns 0 when the target is not an active row of the scope;
        callers must not render 0 as a page.
        """
        ordering = ordering or scope.default_ordering
        ids = self._store.fetch_ordered_ids(scope, ordering)
        try:
            rank = ids.index(target_id) + 1
        except ValueError:
            rank = 0
        page = rank_to_page(rank, max(1, page_limit))
        if page == 0:
            logger.warning(
                "Entity %s not locatable in %s scope (%d active rows)",
                target_id,
                scope.entity.value,
                len(ids),
            )
        return page

    def require_page(
        self,
        scope: ScopeFilter,
        target_id: int,
        page_limit: int,
        ordering: Optional[Ordering] = None,
    ) -> int:
        """Like :meth:`locate_page` but raises EntityNotLocatable instead of returning 0."""
        page = self.locate_page(scope, target_id, page_limit, ordering)
        if page == 0:
            raise EntityNotLocatable(f"{scope.entity.value} {target_id} is not listed")
        return page
