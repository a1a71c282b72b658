"""Ordering of catalogue variants: price sorts and the seeded interleaved shuffle.

The relevance ordering is reproducible: the same seed and the same fetched
variants always give the same sequence, so infinite scroll can request
page N without re-fetching pages 0..N-1. Consecutive slots rarely share a
creator, and within a creator rarely share a product.
"""

from __future__ import annotations

from collections.abc import Callable, Hashable, Sequence
from typing import Protocol, TypeVar

from storefront.services.catalogue_filters import SortMode

T = TypeVar("T")

MASK_32 = 0xFFFFFFFF
FNV_OFFSET_BASIS = 2166136261
FNV_PRIME = 16777619


class Orderable(Protocol):
    """What the ordering needs to know about a variant."""

    product_id: Hashable

    @property
    def creator_id(self) -> Hashable: ...

    @property
    def effective_price(self) -> int: ...


def seeded_rng(seed: str) -> Callable[[], float]:
    """Return a generator of floats in [0, 1) fully determined by ``seed``.

    The seed string is folded into 32 bits with FNV-1a over its code points;
    each call advances the state with one xorshift32 step.
    """
    state = FNV_OFFSET_BASIS
    for char in seed:
        state ^= ord(char)
        state = (state * FNV_PRIME) & MASK_32

    def rand() -> float:
        nonlocal state
        state ^= (state << 13) & MASK_32
        state ^= state >> 17
        state ^= (state << 5) & MASK_32
        return state / 0x100000000

    return rand


def fisher_yates(items: Sequence[T], rand: Callable[[], float]) -> list[T]:
    """Shuffled copy of ``items``; consumes ``len(items) - 1`` draws."""
    shuffled = list(items)
    for i in range(len(shuffled) - 1, 0, -1):
        j = int(rand() * (i + 1))
        shuffled[i], shuffled[j] = shuffled[j], shuffled[i]
    return shuffled


def round_robin(groups: Sequence[Sequence[T]]) -> list[T]:
    """Take the first item of every group, then the second, and so on."""
    longest = max((len(group) for group in groups), default=0)
    merged: list[T] = []
    for index in range(longest):
        for group in groups:
            if index < len(group):
                merged.append(group[index])
    return merged


def group_by_creator_and_product(
    variants: Sequence[Orderable],
) -> dict[Hashable, dict[Hashable, list[Orderable]]]:
    """Nest variants as creator -> product -> variants.

    Keys keep first-seen order of ``variants``; that order drives the RNG
    traversal, so it must come from the fetch result and nothing else.
    """
    creators: dict[Hashable, dict[Hashable, list[Orderable]]] = {}
    for variant in variants:
        products = creators.setdefault(variant.creator_id, {})
        products.setdefault(variant.product_id, []).append(variant)
    return creators


def shuffle_interleaved(variants: Sequence[Orderable], seed: str) -> list[Orderable]:
    """Seeded shuffle that spreads creators and products across the sequence."""
    rand = seeded_rng(seed)

    per_creator: list[list[Orderable]] = []
    for products in group_by_creator_and_product(variants).values():
        shuffled_groups = fisher_yates(
            [fisher_yates(group, rand) for group in products.values()], rand
        )
        per_creator.append(round_robin(shuffled_groups))

    return round_robin(fisher_yates(per_creator, rand))


def sort_by_price(variants: Sequence[Orderable], descending: bool = False) -> list[Orderable]:
    """Stable sort on effective price; equal prices keep fetch order."""
    return sorted(variants, key=lambda v: v.effective_price, reverse=descending)


def order_variants(variants: Sequence[Orderable], sort: str, seed: str) -> list[Orderable]:
    """Order fetched variants for display.

    ``price_asc`` and ``price_desc`` sort on effective price. Every other
    mode, including unknown values, uses the seeded interleaved shuffle.
    """
    if sort == SortMode.PRICE_ASC:
        return sort_by_price(variants)
    if sort == SortMode.PRICE_DESC:
        return sort_by_price(variants, descending=True)
    return shuffle_interleaved(variants, seed)
