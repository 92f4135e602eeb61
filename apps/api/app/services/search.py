"""Catalog search: filter criteria to store query, client-side predicates, and result tracking.

Filtering happens in two stages. :func:`build_query` turns the visitor's
:class:`FilterCriteria` into a conjunctive :class:`PropertyQuery` that the data
store evaluates; :func:`apply_local_filters` then applies the predicates the
store cannot express (the short-code suffix match and the favorites
intersection). Unset criteria add no predicate.

:class:`PropertySearch` owns the displayed result for one browser session and
enforces last-request-wins: a response that arrives after a newer search was
started is dropped.
"""
from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Awaitable, Callable, Iterable, Mapping, Optional, Sequence

from ..repositories.properties import Operator, OrderBy, Predicate, PropertyQuery, PropertyRecord
from ..schemas.properties import FilterCriteria, parse_number
from .favorites import Favorites, FavoritesChannel, FavoritesSet

logger = logging.getLogger(__name__)

PRICE_BUCKETS: dict[str, tuple[float, float | None]] = {
    "0-500000": (0, 500_000),
    "500000-1000000": (500_000, 1_000_000),
    "1000000-2000000": (1_000_000, 2_000_000),
    "2000000+": (2_000_000, None),
}
CUSTOM_PRICE_RANGE = "custom"
ALL_TYPES = frozenset({"all", "todos"})
SHORT_CODE_LENGTH = 4
DEFAULT_ORDER = OrderBy(field="created_at", descending=True)

ADMIN_SORT_KEYS = frozenset(
    {"title", "property_type", "status", "price", "created_at", "city", "bedrooms", "parking_spots", "featured"}
)

Fetcher = Callable[[PropertyQuery], Awaitable[Sequence[PropertyRecord]]]


def short_code(property_id: str) -> str:
    """Display code shown on listing cards: the identifier's last characters."""

    return property_id[-SHORT_CODE_LENGTH:]


def parse_price_range(value: str) -> tuple[float, float | None] | None:
    """Resolve a bucket name or ``"min-max"``/``"min+"`` text to bounds.

    The lower bound is always present (0 when blank); the upper bound is
    ``None`` for open-ended ranges. Unparseable text yields ``None``.
    """

    if value in PRICE_BUCKETS:
        return PRICE_BUCKETS[value]

    text = value.strip()
    if text.endswith("+"):
        low = parse_number(text[:-1])
        return (low, None) if low is not None else None

    low_text, sep, high_text = text.partition("-")
    if not sep:
        return None
    if low_text.strip() and parse_number(low_text) is None:
        return None
    low = parse_number(low_text) or 0.0
    high = parse_number(high_text)
    return low, high if high else None


def _price_predicates(criteria: FilterCriteria) -> list[Predicate]:
    if not criteria.price_range:
        return []

    if criteria.price_range == CUSTOM_PRICE_RANGE:
        predicates = []
        if criteria.custom_price_min is not None and criteria.custom_price_min > 0:
            predicates.append(Predicate("price", Operator.GTE, criteria.custom_price_min))
        if criteria.custom_price_max is not None and criteria.custom_price_max > 0:
            predicates.append(Predicate("price", Operator.LTE, criteria.custom_price_max))
        return predicates

    bounds = parse_price_range(criteria.price_range)
    if bounds is None:
        logger.debug("Ignoring unknown price range %r", criteria.price_range)
        return []
    low, high = bounds
    predicates = [Predicate("price", Operator.GTE, low)]
    if high is not None:
        predicates.append(Predicate("price", Operator.LTE, high))
    return predicates


def build_query(criteria: FilterCriteria) -> PropertyQuery:
    """Compose the store-side predicates for ``criteria``, newest listings first."""

    predicates: list[Predicate] = []

    if criteria.property_type and criteria.property_type.lower() not in ALL_TYPES:
        predicates.append(Predicate("property_type", Operator.EQ, criteria.property_type))
    if criteria.city:
        predicates.append(Predicate("city", Operator.EQ, criteria.city))

    predicates.extend(_price_predicates(criteria))

    if criteria.min_bedrooms is not None:
        predicates.append(Predicate("bedrooms", Operator.GTE, criteria.min_bedrooms))
    if criteria.min_parking_spots is not None:
        predicates.append(Predicate("parking_spots", Operator.GTE, criteria.min_parking_spots))

    return PropertyQuery(predicates=tuple(predicates), order_by=DEFAULT_ORDER)


def apply_local_filters(
    records: Iterable[PropertyRecord],
    criteria: FilterCriteria,
    favorites: FavoritesSet = frozenset(),
) -> list[PropertyRecord]:
    """Apply the predicates evaluated after retrieval, preserving store order."""

    filtered = list(records)

    if criteria.code_fragment:
        fragment = criteria.code_fragment.lower()
        filtered = [record for record in filtered if fragment in short_code(record.id).lower()]

    if criteria.favorites_only:
        filtered = [record for record in filtered if record.id in favorites]

    return filtered


def reset_filters() -> FilterCriteria:
    """Default criteria; its query-string mirror is empty."""

    return FilterCriteria()


def criteria_from_params(params: Mapping[str, str]) -> FilterCriteria:
    """Re-derive criteria from the query-string mirror."""

    return FilterCriteria(
        property_type=params.get("type"),
        city=params.get("city"),
        price_range=params.get("price"),
        custom_price_min=params.get("price_min"),
        custom_price_max=params.get("price_max"),
        min_bedrooms=params.get("bedrooms"),
        min_parking_spots=params.get("parking"),
        code_fragment=params.get("code"),
        favorites_only=params.get("favorite", False),
    )


def criteria_to_params(criteria: FilterCriteria) -> dict[str, str]:
    """Render criteria as the query-string mirror, omitting unset fields."""

    params: dict[str, str] = {}
    if criteria.property_type:
        params["type"] = criteria.property_type
    if criteria.city:
        params["city"] = criteria.city
    if criteria.price_range:
        params["price"] = criteria.price_range
        if criteria.price_range == CUSTOM_PRICE_RANGE:
            if criteria.custom_price_min is not None:
                params["price_min"] = _format_number(criteria.custom_price_min)
            if criteria.custom_price_max is not None:
                params["price_max"] = _format_number(criteria.custom_price_max)
    if criteria.min_bedrooms is not None:
        params["bedrooms"] = str(criteria.min_bedrooms)
    if criteria.min_parking_spots is not None:
        params["parking"] = str(criteria.min_parking_spots)
    if criteria.code_fragment:
        params["code"] = criteria.code_fragment
    if criteria.favorites_only:
        params["favorite"] = "true"
    return params


def _format_number(value: float) -> str:
    return str(int(value)) if float(value).is_integer() else str(value)


@dataclass(frozen=True)
class SearchResult:
    criteria: FilterCriteria
    records: tuple[PropertyRecord, ...]
    error: Optional[str] = None
    ticket: int = 0


@dataclass
class _Matched:
    criteria: FilterCriteria
    records: list[PropertyRecord] = field(default_factory=list)
    error: Optional[str] = None
    ticket: int = 0


class PropertySearch:
    """Displayed search result for one browser session."""

    def __init__(self, favorites: Favorites, channel: FavoritesChannel) -> None:
        self._favorites = favorites
        self._generation = 0
        self._matched: Optional[_Matched] = None
        self.current: Optional[SearchResult] = None
        self._unsubscribe = channel.subscribe(self._on_favorites_change)

    @property
    def latest_ticket(self) -> int:
        return self._generation

    async def search(self, criteria: FilterCriteria, fetch: Fetcher) -> Optional[SearchResult]:
        """Run a search; returns ``None`` if a newer search superseded this one."""

        self._generation += 1
        ticket = self._generation
        query = build_query(criteria)

        error: Optional[str] = None
        try:
            records = list(await fetch(query))
        except Exception as exc:  # noqa: BLE001 - degrade to an empty result
            logger.exception("Property search failed: %s", exc)
            records = []
            error = "Could not load properties"

        if ticket != self._generation:
            logger.debug("Discarding stale search %s; latest is %s", ticket, self._generation)
            return None

        without_favorites = criteria.model_copy(update={"favorites_only": False})
        self._matched = _Matched(
            criteria=criteria,
            records=apply_local_filters(records, without_favorites),
            error=error,
            ticket=ticket,
        )
        self.current = self._render(self._matched, self._favorites.ids)
        return self.current

    def close(self) -> None:
        self._unsubscribe()

    def _render(self, matched: _Matched, favorites: FavoritesSet) -> SearchResult:
        records = matched.records
        if matched.criteria.favorites_only:
            records = [record for record in records if record.id in favorites]
        return SearchResult(
            criteria=matched.criteria,
            records=tuple(records),
            error=matched.error,
            ticket=matched.ticket,
        )

    def _on_favorites_change(self, favorites: FavoritesSet) -> None:
        if self._matched is not None and self._matched.criteria.favorites_only:
            self.current = self._render(self._matched, favorites)


def filter_and_sort_admin(
    records: Iterable[PropertyRecord],
    *,
    search_term: str | None = None,
    status: str = "all",
    property_type: str = "all",
    sort_key: str = "created_at",
    direction: str = "desc",
) -> list[PropertyRecord]:
    """Back-office listing table: free-text search, status/type filters, column sort."""

    if sort_key not in ADMIN_SORT_KEYS:
        raise ValueError(f"Unsupported sort key: {sort_key}")

    filtered = list(records)

    if search_term:
        term = search_term.lower()
        filtered = [
            record
            for record in filtered
            if term in record.title.lower()
            or term in record.city.lower()
            or term in (record.neighborhood or "").lower()
            or term in record.property_type.lower()
        ]

    if status != "all":
        filtered = [record for record in filtered if record.status == status]
    if property_type != "all":
        filtered = [record for record in filtered if record.property_type == property_type]

    def _sort_value(record: PropertyRecord) -> tuple[bool, object]:
        value = getattr(record, sort_key)
        return (value is not None, value if value is not None else 0)

    return sorted(filtered, key=_sort_value, reverse=direction == "desc")
