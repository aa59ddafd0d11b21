from __future__ import annotations

import logging
from dataclasses import dataclass, field
from itertools import islice
from typing import Iterable, List, Optional, Sequence

from .entities import (
    DEFAULT_ESCALATION,
    EPS,
    BoxType,
    EscalationPolicy,
    OpenBox,
    Piece,
)
from .splitter import box_accepts_alone

logger = logging.getLogger(__name__)


def sort_for_placement(pieces: Iterable[Piece]) -> List[Piece]:
    """Sturdy pieces first, bigger pieces first within a tier; stable otherwise."""
    return sorted(pieces, key=lambda p: (-p.fragility_rank, -p.liters))


def order_box_types(box_types: Iterable[BoxType]) -> List[BoxType]:
    return sorted(
        box_types, key=lambda b: (b.usable_liters, b.rank, b.max_weight_kg, b.vented)
    )


def rejection_reason(box: OpenBox, piece: Piece) -> Optional[str]:
    """
    Why ``piece`` cannot join ``box`` right now, or None if it can.

    Checks ventilation, minimum size, weight and volume caps, the box's SKU
    cap and mixing policy, the piece's own mixing preference (and that of
    pieces already inside), and the per-item weight cap for this box.
    """
    box_type = box.box_type
    if piece.requires_vented and not box_type.vented:
        return "needs vented box"
    min_rank = piece.min_box_rank
    if min_rank is not None and box_type.rank < min_rank:
        return f"needs at least {piece.min_box_key}"

    weight = piece.est_weight_kg
    if box.weight_kg + weight > box_type.max_weight_kg + EPS:
        return "over weight"
    if box.liters + piece.liters > box_type.usable_liters + EPS:
        return "over volume"

    same_sku = piece.item_id in box.weight_by_item
    others = [i for i in box.item_ids if i != piece.item_id]
    if (
        not same_sku
        and box_type.max_distinct_skus is not None
        and len(box.item_ids) >= box_type.max_distinct_skus
    ):
        return "sku cap reached"
    if others and not box_type.mixing_allowed:
        return "box does not allow mixing"
    if others and not piece.allow_mixing:
        return "piece does not allow mixing"
    if any(c.item_id != piece.item_id and not c.allow_mixing for c in box.contents):
        return "box holds an item that does not allow mixing"

    cap = piece.max_weight_per_box_kg
    if cap is not None and box.weight_by_item.get(piece.item_id, 0.0) + weight > cap + EPS:
        return "per-item box weight cap"
    return None


def group_fits(box_type: BoxType, group: Sequence[Piece]) -> bool:
    trial = OpenBox(box_type=box_type)
    for piece in group:
        if rejection_reason(trial, piece) is not None:
            return False
        trial.add(piece)
    return True


@dataclass
class AllocationResult:
    boxes: List[OpenBox] = field(default_factory=list)
    dropped: List[Piece] = field(default_factory=list)
    warnings: List[str] = field(default_factory=list)


class BoxAllocator:
    """Single-pass first-fit allocator that may open a larger box up front."""

    def __init__(
        self,
        box_types: Sequence[BoxType],
        escalation: EscalationPolicy = DEFAULT_ESCALATION,
    ) -> None:
        self.box_types = order_box_types(box_types)
        self.escalation = escalation

    def smallest_feasible(self, piece: Piece) -> Optional[BoxType]:
        for box_type in self.box_types:
            if box_accepts_alone(box_type, piece):
                return box_type
        return None

    def next_larger(self, current: BoxType, piece: Piece) -> Optional[BoxType]:
        for box_type in self.box_types:
            if box_type.usable_liters <= current.usable_liters + EPS:
                continue
            if box_accepts_alone(box_type, piece):
                return box_type
        return None

    def _upcoming_same_sku(self, piece: Piece, upcoming: Sequence[Piece]) -> List[Piece]:
        same = (p for p in upcoming if p.item_id == piece.item_id)
        return list(islice(same, max(0, self.escalation.lookahead)))

    def choose_box_type(self, piece: Piece, upcoming: Sequence[Piece]) -> Optional[BoxType]:
        smallest = self.smallest_feasible(piece)
        if smallest is None:
            return None
        larger = self.next_larger(smallest, piece)
        if larger is None:
            return smallest

        if piece.liters >= self.escalation.fill_threshold * smallest.usable_liters - EPS:
            logger.debug(
                f"escalating item {piece.item_id} from {smallest.label} to {larger.label}: "
                f"{piece.liters} L fills at least {self.escalation.fill_threshold:.0%}"
            )
            return larger

        followers = self._upcoming_same_sku(piece, upcoming)
        if followers:
            group = [piece, *followers]
            if group_fits(larger, group):
                logger.debug(
                    f"escalating item {piece.item_id} from {smallest.label} to {larger.label}: "
                    f"it also takes the next {len(followers)} piece(s) of the same item"
                )
                return larger
        return smallest

    def _first_fit(self, boxes: List[OpenBox], piece: Piece) -> Optional[OpenBox]:
        for box in boxes:
            if rejection_reason(box, piece) is None:
                return box
        return None

    def allocate(self, pieces: Sequence[Piece]) -> AllocationResult:
        """Place already sorted pieces; pieces that fit no box type are dropped."""
        result = AllocationResult()
        for idx, piece in enumerate(pieces):
            box = self._first_fit(result.boxes, piece)
            if box is not None:
                box.add(piece)
                continue

            box_type = self.choose_box_type(piece, pieces[idx + 1:])
            if box_type is None:
                message = (
                    f"Item {piece.item_id} piece ({piece.liters} L, {piece.est_weight_kg} kg) "
                    "does not fit any package size; skipped."
                )
                logger.warning(message)
                result.dropped.append(piece)
                result.warnings.append(message)
                continue

            box = OpenBox(box_type=box_type)
            box.add(piece)
            result.boxes.append(box)
            logger.debug(f"opened box #{len(result.boxes)} {box_type.label} for item {piece.item_id}")

        logger.info(
            f"allocated {len(pieces) - len(result.dropped)} piece(s) into {len(result.boxes)} box(es), "
            f"{len(result.dropped)} dropped"
        )
        return result
