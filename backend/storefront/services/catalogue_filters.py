"""Turn raw catalogue query parameters into a normalized storage query."""

from __future__ import annotations

import math
import re
from collections.abc import Iterable
from dataclasses import dataclass

from storefront.db.models.product import Gender

LEADING_INT = re.compile(r"^\s*([+-]?)([0-9]+)")

# Largest value a 32-bit INTEGER column or bound parameter accepts
INT_LIMIT = 2**31 - 1
# Largest euro amount whose cent value still fits INT_LIMIT
MAX_PRICE_EUROS = INT_LIMIT // 100


class SortMode:
    NEWEST = "newest"
    PRICE_ASC = "price_asc"
    PRICE_DESC = "price_desc"


@dataclass(frozen=True)
class CatalogueCriteria:
    """Filter inputs for one catalogue request, before normalization.

    Prices are the raw major-unit strings from the query string; they are
    parsed leniently in :func:`resolve_query`.
    """

    styles: tuple[str, ...] = ()
    sizes: tuple[str, ...] = ()
    genders: tuple[str, ...] = ()
    sort: str = SortMode.NEWEST
    min_price: str | None = None
    max_price: str | None = None


@dataclass(frozen=True)
class NormalizedQuery:
    """Storage query with expanded genders and prices in minor units."""

    styles: tuple[str, ...] = ()
    sizes: tuple[str, ...] = ()
    genders: tuple[str, ...] = ()
    min_price: int = 0
    max_price: int = 0
    sort: str = SortMode.NEWEST


def split_csv(raw: str | None) -> tuple[str, ...]:
    """Split a comma-separated query value, dropping blanks and duplicates."""
    if not raw:
        return ()
    seen: dict[str, None] = {}
    for part in raw.split(","):
        part = part.strip()
        if part:
            seen.setdefault(part, None)
    return tuple(seen)


def parse_int(raw: str | None, default: int, limit: int = INT_LIMIT) -> int:
    """Read a leading integer the way a lenient ``parseInt`` does.

    ``"12"`` and ``"12.9"`` and ``"12abc"`` all give 12; anything without a
    leading integer gives ``default``. The result is clamped to
    ``[-limit, limit]``, however many digits the input carries.
    """
    if raw is None:
        return default
    match = LEADING_INT.match(raw)
    if not match:
        return default
    sign, digits = match.groups()
    digits = digits.lstrip("0") or "0"
    if len(digits) > len(str(limit)):
        value = limit
    else:
        value = min(int(digits), limit)
    return -value if sign == "-" else value


def expand_genders(genders: Iterable[str]) -> tuple[str, ...]:
    """Apply the Unisexe visibility rule to a gender selection.

    Picking Homme or Femme also shows Unisexe products. Picking only
    Unisexe also shows Homme and Femme products. Any other selection is
    returned unchanged.
    """
    expanded = dict.fromkeys(genders)
    male, female, unisex = Gender.MALE.value, Gender.FEMALE.value, Gender.UNISEX.value
    if male in expanded or female in expanded:
        expanded.setdefault(unisex, None)
    elif list(expanded) == [unisex]:
        expanded.setdefault(male, None)
        expanded.setdefault(female, None)
    return tuple(expanded)


def price_ceiling(max_price_cents: int) -> int:
    """Round a price in cents up to whole euros."""
    return math.ceil(max_price_cents / 100)


def resolve_query(criteria: CatalogueCriteria, catalogue_max_price: int) -> NormalizedQuery:
    """Build the storage query for ``criteria``.

    ``catalogue_max_price`` is the highest published price in cents; it
    becomes the default upper bound once rounded up to whole euros.
    """
    min_euros = max(0, parse_int(criteria.min_price, 0, MAX_PRICE_EUROS))
    max_euros = min(
        parse_int(criteria.max_price, price_ceiling(catalogue_max_price), MAX_PRICE_EUROS),
        MAX_PRICE_EUROS,
    )

    return NormalizedQuery(
        styles=criteria.styles,
        sizes=criteria.sizes,
        genders=expand_genders(criteria.genders),
        min_price=min_euros * 100,
        max_price=max_euros * 100,
        sort=criteria.sort,
    )
