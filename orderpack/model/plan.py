from __future__ import annotations

from typing import Dict, List, Sequence

from .entities import (
    OpenBox,
    ItemSummary,
    PackingPlan,
    PieceKind,
    PlanBox,
    PlanSummary,
    QuantityMode,
)
from .pieces import round_kg

NO_BOX_TYPES_WARNING = "No package sizes configured."


def round2(value: float) -> float:
    return round(value + 0.0, 2)


def empty_plan(warnings: Sequence[str]) -> PackingPlan:
    return PackingPlan(boxes=[], summary=PlanSummary(total_boxes=0, per_item=[], warnings=list(warnings)))


def format_box(number: int, box: OpenBox) -> PlanBox:
    liters = sum(p.liters for p in box.contents)
    weight = sum(p.est_weight_kg for p in box.contents)
    usable = box.box_type.usable_liters
    fill = min(1.0, max(0.0, liters / usable)) if usable > 0 else 0.0
    return PlanBox(
        box_number=number,
        box_type_key=box.box_type.key,
        vented=box.box_type.vented,
        estimated_fill_liters=round2(liters),
        estimated_weight_kg=round2(weight),
        fill_fraction=round(fill, 3),
        contents=list(box.contents),
    )


def summarize_items(boxes: Sequence[OpenBox], item_order: Sequence[str]) -> List[ItemSummary]:
    """Per-item bag/bundle counts and totals over placed pieces, in order-line order."""
    by_item: Dict[str, ItemSummary] = {}
    for box in boxes:
        for piece in box.contents:
            entry = by_item.get(piece.item_id)
            if entry is None:
                entry = by_item[piece.item_id] = ItemSummary(
                    item_id=piece.item_id, item_name=piece.item_name
                )
            if piece.kind == PieceKind.bundle:
                entry.bundle_count += 1
            else:
                entry.bag_count += 1
            if piece.mode == QuantityMode.kg:
                entry.total_kg = (entry.total_kg or 0.0) + (piece.kg or 0.0)
            else:
                entry.total_units = (entry.total_units or 0) + (piece.units or 0)

    summaries = []
    for item_id in item_order:
        entry = by_item.pop(item_id, None)
        if entry is None:
            continue
        if entry.total_kg is not None:
            entry.total_kg = round_kg(entry.total_kg)
        summaries.append(entry)
    return summaries


def format_plan(
    boxes: Sequence[OpenBox], item_order: Sequence[str], warnings: Sequence[str]
) -> PackingPlan:
    plan_boxes = [format_box(n, box) for n, box in enumerate(boxes, start=1)]
    return PackingPlan(
        boxes=plan_boxes,
        summary=PlanSummary(
            total_boxes=len(plan_boxes),
            per_item=summarize_items(boxes, item_order),
            warnings=list(warnings),
        ),
    )
