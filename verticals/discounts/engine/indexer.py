"""Cart line indexer: variant id -> cart lines and total quantity."""

from __future__ import annotations

from types import MappingProxyType
from typing import Iterable

from verticals.discounts.engine.models import CartLine, VariantEntry, VariantIndex


def build_variant_index(lines: Iterable[CartLine]) -> VariantIndex:
    """Group cart lines by variant, preserving cart order.

    Lines without a variant id cannot take part in any rule and are left out
    of the lookup, but their ids are still recorded as existing cart lines.
    """
    buckets: dict[str, list[CartLine]] = {}
    line_ids: set[str] = set()

    for line in lines:
        line_ids.add(line.id)
        if not line.variant_id:
            continue
        buckets.setdefault(line.variant_id, []).append(line)

    entries = {
        variant_id: VariantEntry(
            lines=tuple(bucket),
            total_quantity=sum(line.quantity for line in bucket),
        )
        for variant_id, bucket in buckets.items()
    }
    return VariantIndex(
        entries=MappingProxyType(entries),
        line_ids=frozenset(line_ids),
    )
