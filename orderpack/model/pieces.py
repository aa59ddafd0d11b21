from __future__ import annotations

import logging
import math
from typing import List, Optional

from .classifier import BAG_OVERHEAD_LITERS, BUNDLED
from .entities import (
    EPS,
    ItemDescriptor,
    OrderLine,
    PackingProfile,
    Piece,
    PieceKind,
    QuantityMode,
)

logger = logging.getLogger(__name__)

BUNDLE_UNITS = 12
BUNDLE_LITERS = 1.5
KG_DECIMALS = 6


def round3(value: float) -> float:
    return round(value + 0.0, 3)


def round_kg(value: float) -> float:
    # milligram precision
    return round(value + 0.0, KG_DECIMALS)


def _weight_chunks(total_kg: float, cap_kg: float) -> List[float]:
    """Split a weight into full bags of ``cap_kg`` plus one partial bag."""
    full = int(math.floor(total_kg / cap_kg + EPS))
    chunks = [cap_kg] * full
    remainder = round_kg(total_kg - full * cap_kg)
    if remainder > 0:
        chunks.append(remainder)
    if not chunks:
        chunks.append(total_kg)
    return chunks


def _unit_chunks(total_units: int, per_chunk: int) -> List[int]:
    full, remainder = divmod(total_units, per_chunk)
    chunks = [per_chunk] * full
    if remainder:
        chunks.append(remainder)
    return chunks


def _new_piece(
    item: ItemDescriptor,
    profile: PackingProfile,
    kind: PieceKind,
    mode: QuantityMode,
    liters: float,
    kg: Optional[float] = None,
    units: Optional[int] = None,
) -> Piece:
    return Piece(
        item_id=item.id,
        item_name=item.name,
        kind=kind,
        mode=mode,
        liters=round3(liters),
        fragility=profile.fragility,
        allow_mixing=True if kind == PieceKind.bundle else profile.allow_mixing,
        requires_vented=profile.requires_vented,
        kg=round_kg(kg) if kg is not None else None,
        units=units,
        min_box_key=profile.min_box_key,
        max_weight_per_box_kg=profile.max_weight_per_box_kg,
    )


def build_kg_bags(
    item: ItemDescriptor, profile: PackingProfile, total_kg: float
) -> List[Piece]:
    return [
        _new_piece(
            item,
            profile,
            PieceKind.bag,
            QuantityMode.kg,
            liters=kg / profile.density_kg_per_liter + BAG_OVERHEAD_LITERS,
            kg=kg,
        )
        for kg in _weight_chunks(total_kg, profile.max_kg_per_bag)
    ]


def build_unit_bags(
    item: ItemDescriptor, profile: PackingProfile, total_units: int
) -> List[Piece]:
    unit_kg = item.unit_weight_kg
    if unit_kg is None:
        # unknown unit weight: one piece, oversize is handled by the splitter
        liters = total_units * profile.liters_per_unit + BAG_OVERHEAD_LITERS
        return [
            _new_piece(
                item, profile, PieceKind.bag, QuantityMode.unit, liters=liters, units=total_units
            )
        ]

    per_bag = max(1, int(math.floor(profile.max_kg_per_bag / unit_kg + EPS)))
    pieces = []
    for units in _unit_chunks(total_units, per_bag):
        kg = units * unit_kg
        if profile.unit_volume_liters:
            liters = units * profile.unit_volume_liters
        else:
            liters = kg / profile.density_kg_per_liter
        pieces.append(
            _new_piece(
                item,
                profile,
                PieceKind.bag,
                QuantityMode.unit,
                liters=liters + BAG_OVERHEAD_LITERS,
                kg=kg,
                units=units,
            )
        )
    return pieces


def build_bundles(
    item: ItemDescriptor, profile: PackingProfile, total_units: int
) -> List[Piece]:
    unit_kg = item.unit_weight_kg
    pieces = []
    for units in _unit_chunks(total_units, BUNDLE_UNITS):
        if profile.unit_volume_liters:
            liters = units * profile.unit_volume_liters
        else:
            liters = BUNDLE_LITERS * units / BUNDLE_UNITS
        pieces.append(
            _new_piece(
                item,
                profile,
                PieceKind.bundle,
                QuantityMode.unit,
                liters=liters,
                kg=units * unit_kg if unit_kg is not None else None,
                units=units,
            )
        )
    return pieces


def build_pieces(
    line: OrderLine, item: ItemDescriptor, profile: PackingProfile
) -> List[Piece]:
    """
    Turn one order line into the bags/bundles that will be placed in boxes.

    Kg lines become weight-capped bags. Unit lines of bundled goods become
    fixed-count bundles; other unit lines are bagged by weight when the unit
    weight is known, otherwise kept as a single piece.
    """
    if line.quantity <= 0:
        return []

    if line.mode == QuantityMode.kg:
        pieces = build_kg_bags(item, profile, line.quantity)
    else:
        total_units = int(round(line.quantity))
        if total_units <= 0:
            return []
        if profile.bucket == BUNDLED:
            pieces = build_bundles(item, profile, total_units)
        else:
            pieces = build_unit_bags(item, profile, total_units)

    logger.debug(
        f"item {item.id} ({profile.bucket}, {line.mode.value}) -> {len(pieces)} piece(s)"
    )
    return pieces
