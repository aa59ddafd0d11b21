from __future__ import annotations

import logging
from dataclasses import replace
from typing import List, Optional, Sequence, Tuple

from .entities import EPS, BoxType, Piece
from .pieces import round3, round_kg

logger = logging.getLogger(__name__)

MAX_SPLIT_ROUNDS = 8
MIN_SPLIT_KG = 0.002


def box_accepts_alone(box_type: BoxType, piece: Piece) -> bool:
    """Whether an empty box of this type could hold the piece by itself."""
    if piece.requires_vented and not box_type.vented:
        return False
    min_rank = piece.min_box_rank
    if min_rank is not None and box_type.rank < min_rank:
        return False
    weight = piece.est_weight_kg
    if weight > box_type.max_weight_kg + EPS:
        return False
    if piece.max_weight_per_box_kg is not None and weight > piece.max_weight_per_box_kg + EPS:
        return False
    return piece.liters <= box_type.usable_liters + EPS


def largest_compatible_box(
    box_types: Sequence[BoxType], piece: Piece
) -> Optional[BoxType]:
    """Largest box type (by usable liters) matching the piece's vent/min-size needs."""
    min_rank = piece.min_box_rank
    candidates = [
        b
        for b in box_types
        if (b.vented or not piece.requires_vented)
        and (min_rank is None or b.rank >= min_rank)
    ]
    if not candidates:
        return None
    return max(candidates, key=lambda b: (b.usable_liters, b.max_weight_kg, b.rank))


def bisect_piece(piece: Piece) -> Optional[Tuple[Piece, Piece]]:
    """
    Halve a piece's kg, units and liters. The second half takes the exact
    remainder so both halves add back up to the parent. Returns None when
    the piece is already indivisible (a single unit or a negligible weight).
    """
    if piece.units is not None:
        if piece.units < 2:
            return None
        first_units = (piece.units + 1) // 2
        second_units = piece.units - first_units
        share = first_units / piece.units
    else:
        if piece.kg is None or piece.kg < MIN_SPLIT_KG:
            return None
        first_units = second_units = None
        share = 0.5

    first_liters = round3(piece.liters * share)
    second_liters = round3(piece.liters - first_liters)
    if piece.kg is not None:
        first_kg = round_kg(piece.kg * share)
        second_kg = round_kg(piece.kg - first_kg)
    else:
        first_kg = second_kg = None

    first = replace(piece, units=first_units, kg=first_kg, liters=first_liters)
    second = replace(piece, units=second_units, kg=second_kg, liters=second_liters)
    return first, second


def split_piece(
    piece: Piece, box_types: Sequence[BoxType], max_rounds: int = MAX_SPLIT_ROUNDS
) -> List[Piece]:
    target = largest_compatible_box(box_types, piece)
    if target is None or box_accepts_alone(target, piece):
        return [piece]

    frontier = [piece]
    for _ in range(max_rounds):
        if all(box_accepts_alone(target, p) for p in frontier):
            break
        next_frontier: List[Piece] = []
        for p in frontier:
            halves = None if box_accepts_alone(target, p) else bisect_piece(p)
            if halves is None:
                next_frontier.append(p)
            else:
                next_frontier.extend(halves)
        if len(next_frontier) == len(frontier):
            break
        frontier = next_frontier

    logger.info(
        f"split item {piece.item_id} piece ({piece.liters} L, {piece.est_weight_kg} kg) "
        f"into {len(frontier)} fragment(s) for {target.label}"
    )
    return frontier


def split_oversized(pieces: Sequence[Piece], box_types: Sequence[BoxType]) -> List[Piece]:
    out: List[Piece] = []
    for piece in pieces:
        out.extend(split_piece(piece, box_types))
    return out
