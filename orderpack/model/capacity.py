"""
Container capacity estimates for farmer-order intake.

Answers "how many crates of this size does N kg of an item need?" using the
same bucket densities as the order packing engine. Unlike the order packer
it does not build pieces; a container's capacity for an item is simply the
smaller of its weight limit and what its usable volume holds at the item's
density.
"""

from __future__ import annotations

import logging
import math
from dataclasses import dataclass, field
from typing import List, Literal, Mapping, Optional, Sequence

from .classifier import resolve_profile
from .entities import ItemDescriptor, ItemPackingOverride

logger = logging.getLogger(__name__)

NO_CONTAINERS_WARNING = "No container sizes configured."

LimitingFactor = Literal["weight", "volume"]


def round2(value: float) -> float:
    return round(value + 0.0, 2)


@dataclass(frozen=True)
class ContainerSize:
    key: str
    usable_liters: float
    max_weight_kg: float
    name: Optional[str] = None
    vented: bool = True

    def __post_init__(self) -> None:
        if not self.key:
            raise ValueError("container key is required")
        if self.usable_liters is None or self.usable_liters < 0:
            raise ValueError(f"usable_liters cannot be negative, got {self.usable_liters!r}")
        if self.max_weight_kg is None or self.max_weight_kg <= 0:
            raise ValueError(f"max_weight_kg must be positive, got {self.max_weight_kg!r}")


@dataclass(frozen=True)
class FarmerOrderLine:
    item_id: str
    estimated_kg: Optional[float] = None
    committed_kg: Optional[float] = None

    @property
    def total_kg(self) -> float:
        if self.committed_kg is not None:
            return float(self.committed_kg)
        return float(self.estimated_kg or 0)


@dataclass
class ContainerCapacity:
    container_key: str
    container_name: Optional[str]
    usable_liters: float
    density_kg_per_liter: float
    max_kg_by_volume: float
    max_kg_by_weight_limit: float
    limiting_kg: float
    limiting_factor: LimitingFactor
    approx_max_units: Optional[int] = None


@dataclass
class ContainerPlanLine:
    item_id: str
    item_name: str
    total_kg: float
    container_key: str
    container_name: Optional[str]
    capacity_kg_per_container: float
    containers_needed: int
    limiting_factor: LimitingFactor


@dataclass
class ContainerPlan:
    lines: List[ContainerPlanLine] = field(default_factory=list)
    total_containers: int = 0
    warnings: List[str] = field(default_factory=list)


@dataclass
class ContainerEstimate:
    item_id: str
    item_name: str
    quantity_kg: float
    container_key: str
    container_name: Optional[str]
    containers_needed: int
    capacity_kg_per_container: float
    limiting_factor: LimitingFactor
    approx_max_units: Optional[int] = None


def estimate_container_capacity_for_item(
    item: ItemDescriptor,
    container: ContainerSize,
    override: Optional[ItemPackingOverride] = None,
) -> ContainerCapacity:
    profile = resolve_profile(item, override)
    density = profile.density_kg_per_liter

    max_kg_by_volume = round2(container.usable_liters * density)
    max_kg_by_weight = container.max_weight_kg
    limiting_kg = round2(min(max_kg_by_volume, max_kg_by_weight))
    limiting_factor: LimitingFactor = "weight" if max_kg_by_weight < max_kg_by_volume else "volume"

    approx_units = None
    unit_kg = item.unit_weight_kg
    if unit_kg is not None:
        approx_units = int(math.floor(limiting_kg / unit_kg))
    elif profile.liters_per_unit > 0:
        approx_units = int(math.floor(container.usable_liters / profile.liters_per_unit))

    return ContainerCapacity(
        container_key=container.key,
        container_name=container.name,
        usable_liters=container.usable_liters,
        density_kg_per_liter=density,
        max_kg_by_volume=max_kg_by_volume,
        max_kg_by_weight_limit=max_kg_by_weight,
        limiting_kg=limiting_kg,
        limiting_factor=limiting_factor,
        approx_max_units=approx_units,
    )


def estimate_container_capacities_for_item(
    item: ItemDescriptor,
    containers: Sequence[ContainerSize],
    override: Optional[ItemPackingOverride] = None,
) -> List[ContainerCapacity]:
    return [estimate_container_capacity_for_item(item, c, override) for c in containers]


def pick_best_container(
    capacities: Sequence[ContainerCapacity], total_kg: float
) -> Optional[ContainerCapacity]:
    """Smallest container holding everything at once, else the biggest one."""
    viable = sorted((c for c in capacities if c.limiting_kg > 0), key=lambda c: c.limiting_kg)
    if not viable:
        return None
    for capacity in viable:
        if capacity.limiting_kg >= total_kg:
            return capacity
    return viable[-1]


def _containers_needed(total_kg: float, capacity_kg: float) -> int:
    return int(math.ceil(total_kg / capacity_kg)) if capacity_kg > 0 else 0


def estimate_containers_for_lines(
    lines: Sequence[FarmerOrderLine],
    items_by_id: Mapping[str, ItemDescriptor],
    containers: Sequence[ContainerSize],
    overrides_by_id: Optional[Mapping[str, ItemPackingOverride]] = None,
) -> ContainerPlan:
    if not containers:
        return ContainerPlan(lines=[], total_containers=0, warnings=[NO_CONTAINERS_WARNING])

    overrides_by_id = overrides_by_id or {}
    plan = ContainerPlan()
    for line in lines or []:
        item_id = str(line.item_id)
        item = items_by_id.get(item_id)
        if item is None:
            plan.warnings.append(f"Item {item_id} not found; skipping.")
            continue

        total_kg = line.total_kg
        if total_kg <= 0:
            continue

        capacities = estimate_container_capacities_for_item(
            item, containers, overrides_by_id.get(item_id)
        )
        best = pick_best_container(capacities, total_kg)
        if best is None:
            plan.warnings.append(f"No feasible container for item {item_id}.")
            continue

        plan.lines.append(
            ContainerPlanLine(
                item_id=item_id,
                item_name=item.name,
                total_kg=round2(total_kg),
                container_key=best.container_key,
                container_name=best.container_name,
                capacity_kg_per_container=best.limiting_kg,
                containers_needed=_containers_needed(total_kg, best.limiting_kg),
                limiting_factor=best.limiting_factor,
            )
        )

    plan.total_containers = sum(l.containers_needed for l in plan.lines)
    logger.info(
        f"container plan: {len(plan.lines)} line(s), {plan.total_containers} container(s)"
    )
    return plan


def estimate_containers_for_item_quantity(
    item: ItemDescriptor,
    quantity_kg: float,
    containers: Sequence[ContainerSize],
    override: Optional[ItemPackingOverride] = None,
) -> Optional[ContainerEstimate]:
    total_kg = quantity_kg or 0
    if total_kg <= 0 or not containers:
        return None

    best = pick_best_container(
        estimate_container_capacities_for_item(item, containers, override), total_kg
    )
    if best is None:
        return None

    return ContainerEstimate(
        item_id=item.id,
        item_name=item.name,
        quantity_kg=round2(total_kg),
        container_key=best.container_key,
        container_name=best.container_name,
        containers_needed=_containers_needed(total_kg, best.limiting_kg),
        capacity_kg_per_container=best.limiting_kg,
        limiting_factor=best.limiting_factor,
        approx_max_units=best.approx_max_units,
    )
