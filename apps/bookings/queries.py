"""
Paginated Booking Queries

Operators browse bookings newest first, one page at a time, optionally
narrowed by equality filters. A free-text search abandons cursor paging: it
reads a bounded batch of filter-matching bookings and matches the text in
Python, so very old matches beyond the ceiling are not found.

``BookingQuerySession`` keeps the state of one operator's list view (loaded
bookings, cursor, loading flag, error, live refresh of the first page).
"""

from __future__ import annotations

import base64
import json
import logging
import uuid
from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import Callable, Mapping

from django.conf import settings  # type: ignore

from .domain.entities import BookingRecord
from .repositories import AbstractBookingRepository, BookingStoreError, Cursor

logger = logging.getLogger(__name__)

PAGE_SIZE = 20
SEARCH_CEILING = 1000
IGNORED_FILTER_VALUES = (None, "", "all")


@dataclass(frozen=True)
class BookingFilters:
    status: str | None = None
    booking_type: str | None = None
    user_id: str | None = None

    @classmethod
    def from_params(cls, params: Mapping[str, str]) -> 'BookingFilters':
        return cls(
            status=params.get("status"),
            booking_type=params.get("booking_type"),
            user_id=params.get("user_id"),
        )

    def as_lookup(self) -> dict[str, str]:
        """Equality lookups; blank values and "all" mean no filter."""

        lookup = {
            "status": self.status,
            "booking_type": self.booking_type,
            "user_id": self.user_id,
        }
        return {name: value for name, value in lookup.items() if value not in IGNORED_FILTER_VALUES}


def matches_search_term(booking: BookingRecord, term: str) -> bool:
    """Case-insensitive substring match on customer name, email or booking id."""

    needle = term.strip().lower()
    if not needle:
        return True
    return (
        needle in booking.user_name.lower()
        or needle in booking.user_email.lower()
        or needle in booking.id.lower()
    )


def encode_cursor(cursor: Cursor) -> str:
    raw = json.dumps([cursor.created_at.isoformat(), cursor.id])
    return base64.urlsafe_b64encode(raw.encode("utf-8")).decode("ascii")


def decode_cursor(token: str) -> Cursor:
    """Inverse of ``encode_cursor``; raises ``ValueError`` on a bad token."""

    try:
        created_at, booking_id = json.loads(base64.urlsafe_b64decode(token.encode("ascii")))
        return Cursor(datetime.fromisoformat(created_at), str(uuid.UUID(str(booking_id))))
    except (TypeError, ValueError, UnicodeError) as exc:
        raise ValueError(f"Invalid cursor: {token!r}") from exc


@dataclass
class BookingPage:
    bookings: list[BookingRecord] = field(default_factory=list)
    has_more: bool = False
    next_cursor: Cursor | None = None


class BookingQueryService:
    """Stateless page and search reads over a booking repository."""

    def __init__(
        self,
        repository: AbstractBookingRepository,
        page_size: int | None = None,
        search_ceiling: int | None = None,
    ):
        self.repository = repository
        self.page_size = page_size or getattr(settings, "BOOKINGS_PAGE_SIZE", PAGE_SIZE)
        self.search_ceiling = search_ceiling or getattr(settings, "BOOKINGS_SEARCH_CEILING", SEARCH_CEILING)

    def page_from_records(self, records: list[BookingRecord]) -> BookingPage:
        """Cut a look-ahead batch (``page_size + 1`` records) into a page."""

        has_more = len(records) > self.page_size
        bookings = records[: self.page_size]
        next_cursor = Cursor.after_record(bookings[-1]) if has_more else None
        return BookingPage(bookings=bookings, has_more=has_more, next_cursor=next_cursor)

    def fetch_page(self, filters: BookingFilters, cursor: Cursor | None = None) -> BookingPage:
        # One record past the page tells whether another page exists
        records = self.repository.find(
            filters=filters.as_lookup(),
            after=cursor,
            limit=self.page_size + 1,
        )
        return self.page_from_records(records)

    def search(self, filters: BookingFilters, term: str) -> BookingPage:
        candidates = self.repository.find(filters=filters.as_lookup(), limit=self.search_ceiling)
        matches = [booking for booking in candidates if matches_search_term(booking, term)]
        logger.debug(f"Search {term!r}: {len(matches)} of {len(candidates)} candidates matched")
        return BookingPage(bookings=matches, has_more=False, next_cursor=None)


class QueryMode(Enum):
    PAGE = 'page'
    SEARCH = 'search'


class BookingQuerySession:
    """
    State of one booking list view

    Every filter or search change starts a new generation; results of a
    fetch started under an older generation are dropped, so the last change
    always wins. Live refresh follows the first page only and is suspended
    while a search term is set.

    A store error is kept in ``error`` and stops further automatic loading
    until the filters, the term or ``refresh`` start over.

    A live session holds a store subscription (signal receivers on the
    ``Booking`` model) until ``close`` is called; owners must close it, or
    use the session as a context manager.
    """

    def __init__(
        self,
        service: BookingQueryService,
        filters: BookingFilters | None = None,
        live: bool = False,
        on_update: Callable[['BookingQuerySession'], None] | None = None,
    ):
        self.service = service
        self.filters = filters or BookingFilters()
        self.search_term = ""
        self.bookings: list[BookingRecord] = []
        self.has_more = False
        self.loading = False
        self.error: str | None = None
        self._cursor: Cursor | None = None
        self._generation = 0
        self._live_requested = live
        self._unsubscribe: Callable[[], None] | None = None
        self._on_update = on_update
        self._closed = False

    @property
    def mode(self) -> QueryMode:
        return QueryMode.SEARCH if self.search_term.strip() else QueryMode.PAGE

    @property
    def is_live(self) -> bool:
        return self._unsubscribe is not None

    # ===== Commands =====

    def set_filters(self, filters: BookingFilters) -> None:
        self.filters = filters
        self._start_over()

    def set_search_term(self, term: str) -> None:
        self.search_term = term or ""
        self._start_over()

    def refresh(self) -> None:
        self._start_over()

    def load_more(self) -> None:
        if self.loading or not self.has_more or self.mode is QueryMode.SEARCH or self.error is not None:
            return
        self._fetch(append=True)

    def enable_live(self) -> None:
        self._live_requested = True
        if not self.is_live and self._should_be_live():
            self._start_over()

    def disable_live(self) -> None:
        self._live_requested = False
        self._stop_live()

    def __enter__(self) -> 'BookingQuerySession':
        return self

    def __exit__(self, exc_type, exc_val, exc_tb) -> None:
        self.close()

    def close(self) -> None:
        """Stop live updates; required before dropping a live session."""
        self._closed = True
        self._generation += 1
        self._stop_live()
        self.loading = False

    # ===== Internals =====

    def _should_be_live(self) -> bool:
        return self._live_requested and self.mode is QueryMode.PAGE and not self._closed

    def _start_over(self) -> None:
        if self._closed:
            return
        self._generation += 1
        self._stop_live()
        self.bookings = []
        self._cursor = None
        self.has_more = False
        self.error = None

        if self._should_be_live():
            self._start_live()
        else:
            self._fetch(append=False)

    def _fetch(self, append: bool) -> None:
        generation = self._generation
        self.loading = True
        try:
            if self.mode is QueryMode.SEARCH:
                page = self.service.search(self.filters, self.search_term)
            else:
                page = self.service.fetch_page(self.filters, self._cursor if append else None)
        except BookingStoreError as exc:
            if generation == self._generation:
                self._fail(exc)
            return
        except Exception as exc:
            logger.error(f"Unexpected failure while loading bookings: {exc}", exc_info=True)
            if generation == self._generation:
                self._fail(BookingStoreError(str(exc) or type(exc).__name__))
            return

        if generation != self._generation:
            logger.debug("Dropping results of a superseded booking fetch")
            return
        self._apply(page, append)

    def _apply(self, page: BookingPage, append: bool) -> None:
        self.bookings = self.bookings + page.bookings if append else page.bookings
        self.has_more = page.has_more
        self._cursor = page.next_cursor
        self.loading = False
        self._notify()

    def _fail(self, exc: BookingStoreError) -> None:
        logger.warning(f"Booking list failed to load: {exc}")
        self.error = str(exc)
        self.has_more = False
        self.loading = False
        self._stop_live()
        self._notify()

    def _start_live(self) -> None:
        generation = self._generation

        def on_change(records: list[BookingRecord]) -> None:
            if generation != self._generation:
                return
            self._apply(self.service.page_from_records(records), append=False)

        def on_error(exc: BookingStoreError) -> None:
            if generation != self._generation:
                return
            self._fail(exc)

        self.loading = True
        try:
            unsubscribe = self.service.repository.subscribe(
                filters=self.filters.as_lookup(),
                limit=self.service.page_size + 1,
                on_change=on_change,
                on_error=on_error,
            )
        except BookingStoreError as exc:
            on_error(exc)
            return
        except Exception as exc:
            logger.error(f"Unexpected failure while subscribing to bookings: {exc}", exc_info=True)
            on_error(BookingStoreError(str(exc) or type(exc).__name__))
            return
        if generation == self._generation and self.error is None:
            self._unsubscribe = unsubscribe
        else:
            unsubscribe()

    def _stop_live(self) -> None:
        if self._unsubscribe is not None:
            unsubscribe, self._unsubscribe = self._unsubscribe, None
            unsubscribe()

    def _notify(self) -> None:
        if self._on_update is not None:
            self._on_update(self)
