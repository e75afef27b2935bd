"""Page arithmetic and page request/result models.

Every listing in Agora goes through the three helpers at the top of this
module. They all use integer ceiling division so that exact multiples
never produce an extra (or missing) page.
"""

from typing import Any, Generic, Mapping, TypeVar

from pydantic import BaseModel, Field

T = TypeVar("T")

DEFAULT_PAGE = 1
DEFAULT_LIMIT = 10
MAX_LIMIT = 100
# Keeps offset(MAX_PAGE, MAX_LIMIT) well inside a signed 64-bit SQL integer.
MAX_PAGE = 1_000_000_000

# Choices offered by the per-page selector under every paginated list.
PER_PAGE_CHOICES = (10, 20, 50, 100)


class InvalidPageRequest(ValueError):
    """Raised when a page/limit value cannot be parsed."""


def offset(page: int, limit: int) -> int:
    """Number of rows to skip for a 1-based page."""
    return (page - 1) * limit


def total_pages(total: int, limit: int) -> int:
    """Number of pages needed to show ``total`` rows, ``limit`` per page."""
    if total <= 0:
        return 0
    return (total + limit - 1) // limit


def rank_to_page(rank: int, limit: int) -> int:
    """Page holding the row at 1-based position ``rank``.

    A rank of 0 means "not found" and maps to page 0, which callers must
    never render as a real page.
    """
    if rank <= 0:
        return 0
    return (rank + limit - 1) // limit


def _parse_int(value: Any) -> int:
    if isinstance(value, bool):
        raise InvalidPageRequest(f"not an integer: {value!r}")
    if isinstance(value, int):
        return value
    try:
        return int(str(value).strip())
    except (TypeError, ValueError):
        raise InvalidPageRequest(f"not an integer: {value!r}") from None


class PageRequest(BaseModel):
    """A validated page window. Use :meth:`from_args` for user input."""

    page: int = Field(default=DEFAULT_PAGE, ge=1, le=MAX_PAGE)
    limit: int = Field(default=DEFAULT_LIMIT, ge=1, le=MAX_LIMIT)

    @property
    def offset(self) -> int:
        return offset(self.page, self.limit)

    @classmethod
    def normalize(cls, page: Any = None, limit: Any = None) -> "PageRequest":
        """Build a request from loose values, never failing.

        Missing or unparseable values fall back to the defaults. A page
        below 1 becomes 1, a page above ``MAX_PAGE`` becomes ``MAX_PAGE``,
        and the limit is clamped to ``[1, MAX_LIMIT]``, so ``limit=0``
        becomes 1 and ``limit=500`` becomes 100.
        """
        try:
            parsed_page = DEFAULT_PAGE if page is None else _parse_int(page)
        except InvalidPageRequest:
            parsed_page = DEFAULT_PAGE
        try:
            parsed_limit = DEFAULT_LIMIT if limit is None else _parse_int(limit)
        except InvalidPageRequest:
            parsed_limit = DEFAULT_LIMIT

        if parsed_page < 1:
            parsed_page = DEFAULT_PAGE
        parsed_page = min(parsed_page, MAX_PAGE)
        parsed_limit = max(1, min(parsed_limit, MAX_LIMIT))
        return cls(page=parsed_page, limit=parsed_limit)

    @classmethod
    def from_args(cls, args: Mapping[str, Any]) -> "PageRequest":
        """Read ``page`` and ``per_page`` from a query-string mapping."""
        return cls.normalize(args.get("page"), args.get("per_page"))


class PageResult(BaseModel, Generic[T]):
    """One window of a listing plus the size of the whole listing."""

    items: list[T] = Field(default_factory=list)
    total: int = Field(default=0, ge=0)
    page: int = DEFAULT_PAGE
    limit: int = DEFAULT_LIMIT

    @property
    def total_pages(self) -> int:
        return total_pages(self.total, self.limit)

    @property
    def has_next(self) -> bool:
        return self.page < self.total_pages

    @property
    def has_previous(self) -> bool:
        return self.page > 1

    def to_dict(self) -> dict[str, Any]:
        """JSON-friendly form used by the REST API."""
        return {
            "items": list(self.items),
            "total": self.total,
            "page": self.page,
            "per_page": self.limit,
            "pages": self.total_pages,
        }


def pagination_context(result: PageResult) -> dict[str, Any] | None:
    """Template context for the pagination bar under a listing.

    Returns None when the listing is empty so templates can skip the bar.
    """
    pages = result.total_pages
    if pages == 0:
        return None
    return {
        "page": result.page,
        "per_page": result.limit,
        "pages": list(range(1, pages + 1)),
        "previous_page": min(result.page - 1, pages) if result.has_previous else None,
        "next_page": result.page + 1 if result.has_next else None,
        "per_pages": [
            {"limit": choice, "selected": choice == result.limit}
            for choice in PER_PAGE_CHOICES
        ],
    }
