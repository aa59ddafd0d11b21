from __future__ import annotations

import time
from typing import Dict, List, Mapping, Optional, Sequence, Tuple

from .allocator import BoxAllocator, sort_for_placement
from .classifier import resolve_profile
from .entities import (
    DEFAULT_ESCALATION,
    BoxType,
    EscalationPolicy,
    ItemDescriptor,
    ItemPackingOverride,
    OrderLine,
    PackingPlan,
    PackingProfile,
    Piece,
)
from .pieces import build_pieces
from .plan import NO_BOX_TYPES_WARNING, empty_plan, format_plan
from .splitter import split_oversized

from orderpack.logger import logger


def _check_box_types(box_types: Optional[Sequence[BoxType]]) -> List[BoxType]:
    if box_types is None:
        return []
    checked = list(box_types)
    for idx, box_type in enumerate(checked):
        if not isinstance(box_type, BoxType):
            raise TypeError(
                f"box_types[{idx}] must be a BoxType, got {type(box_type).__name__}"
            )
    return checked


def compute_packing(
    lines: Sequence[OrderLine],
    items_by_id: Mapping[str, ItemDescriptor],
    box_types: Optional[Sequence[BoxType]],
    overrides_by_id: Optional[Mapping[str, ItemPackingOverride]] = None,
    escalation: EscalationPolicy = DEFAULT_ESCALATION,
) -> PackingPlan:
    """
    Build the packing plan for one order.

    Lines whose item is missing from ``items_by_id`` are skipped and pieces
    that fit no configured box are dropped; both are reported in
    ``plan.summary.warnings``. With no box types at all the plan is empty.
    Identical inputs always produce an identical plan.
    """
    box_types = _check_box_types(box_types)
    if not box_types:
        logger.warning("packing requested with no package sizes configured")
        return empty_plan([NO_BOX_TYPES_WARNING])

    start_time = time.perf_counter()
    overrides_by_id = overrides_by_id or {}
    warnings: List[str] = []
    profiles: Dict[str, PackingProfile] = {}
    item_order: List[str] = []
    pieces: List[Piece] = []

    for line in lines or []:
        item_id = str(line.item_id)
        item = items_by_id.get(item_id)
        if item is None:
            logger.warning(f"item {item_id} not found in master data; line skipped")
            warnings.append(f"Item {item_id} not found; skipping.")
            continue

        profile = profiles.get(item_id)
        if profile is None:
            profile = profiles[item_id] = resolve_profile(
                item, overrides_by_id.get(item_id), warnings
            )
        if item_id not in item_order:
            item_order.append(item_id)

        built = build_pieces(line, item, profile)
        pieces.extend(split_oversized(built, box_types))

    allocation = BoxAllocator(box_types, escalation).allocate(sort_for_placement(pieces))
    warnings.extend(allocation.warnings)
    plan = format_plan(allocation.boxes, item_order, warnings)

    elapsed_time = time.perf_counter() - start_time
    logger.info(
        f"packing plan: {len(lines or [])} line(s), {len(pieces)} piece(s), "
        f"{plan.summary.total_boxes} box(es), {len(warnings)} warning(s) in {elapsed_time:.4f}s"
    )
    return plan


def compute_packing_for_orders(
    orders: Sequence[Tuple[str, Sequence[OrderLine]]],
    items_by_id: Mapping[str, ItemDescriptor],
    box_types: Optional[Sequence[BoxType]],
    overrides_by_id: Optional[Mapping[str, ItemPackingOverride]] = None,
    escalation: EscalationPolicy = DEFAULT_ESCALATION,
) -> List[Tuple[str, PackingPlan]]:
    """One plan per (order id, lines) pair, all sharing the same master data."""
    return [
        (
            order_id,
            compute_packing(lines, items_by_id, box_types, overrides_by_id, escalation),
        )
        for order_id, lines in orders
    ]
