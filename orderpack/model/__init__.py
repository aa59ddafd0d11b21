"""
Packing model - turns order lines into a box-by-box packing plan.

This module re-exports the public pieces from their respective modules:
- entities: dataclasses shared by every stage (BoxType, Piece, PackingPlan, ...)
- classifier: bucket rule table and override resolution
- pieces: bags/bundles built from one order line
- splitter: bounded halving of pieces too big for any box
- allocator: placement order and first-fit allocation with escalation
- plan: box totals and per-item summary
- solver: compute_packing, the end-to-end entry point
- capacity: container capacity estimates for farmer orders
"""

from __future__ import annotations

from .entities import (
    BOX_KEY_ORDER,
    DEFAULT_ESCALATION,
    BoxType,
    EscalationPolicy,
    Fragility,
    ItemDescriptor,
    ItemPackingOverride,
    ItemSummary,
    OrderLine,
    PackingPlan,
    PackingProfile,
    Piece,
    PieceKind,
    PlanBox,
    PlanSummary,
    QuantityMode,
    calc_usable_liters,
)
from .classifier import classify, resolve_profile
from .pieces import build_pieces
from .splitter import MAX_SPLIT_ROUNDS, bisect_piece, split_piece
from .allocator import BoxAllocator, rejection_reason, sort_for_placement
from .plan import NO_BOX_TYPES_WARNING
from .solver import compute_packing, compute_packing_for_orders
from .capacity import (
    ContainerSize,
    FarmerOrderLine,
    estimate_container_capacity_for_item,
    estimate_containers_for_item_quantity,
    estimate_containers_for_lines,
)

__all__ = [
    # Entities
    "BOX_KEY_ORDER",
    "DEFAULT_ESCALATION",
    "BoxType",
    "EscalationPolicy",
    "Fragility",
    "ItemDescriptor",
    "ItemPackingOverride",
    "ItemSummary",
    "OrderLine",
    "PackingPlan",
    "PackingProfile",
    "Piece",
    "PieceKind",
    "PlanBox",
    "PlanSummary",
    "QuantityMode",
    "calc_usable_liters",
    # Pipeline stages
    "classify",
    "resolve_profile",
    "build_pieces",
    "MAX_SPLIT_ROUNDS",
    "bisect_piece",
    "split_piece",
    "BoxAllocator",
    "rejection_reason",
    "sort_for_placement",
    "NO_BOX_TYPES_WARNING",
    # Entry points
    "compute_packing",
    "compute_packing_for_orders",
    # Container capacity
    "ContainerSize",
    "FarmerOrderLine",
    "estimate_container_capacity_for_item",
    "estimate_containers_for_item_quantity",
    "estimate_containers_for_lines",
]
