from __future__ import annotations

import enum
from dataclasses import dataclass, field
from typing import Dict, List, Optional, Tuple

EPS = 1e-9
FALLBACK_DENSITY_KG_PER_LITER = 0.5

BOX_KEY_ORDER = ("Small", "Medium", "Large")
_BOX_KEY_RANK = {key.lower(): rank for rank, key in enumerate(BOX_KEY_ORDER)}

DEFAULT_HEADROOM = 0.1
MAX_HEADROOM = 0.9


class Fragility(str, enum.Enum):
    very_fragile = "very_fragile"
    fragile = "fragile"
    normal = "normal"
    sturdy = "sturdy"


FRAGILITY_RANK: Dict[Fragility, int] = {
    Fragility.very_fragile: 0,
    Fragility.fragile: 1,
    Fragility.normal: 2,
    Fragility.sturdy: 3,
}


class PieceKind(str, enum.Enum):
    bag = "bag"
    bundle = "bundle"


class QuantityMode(str, enum.Enum):
    kg = "kg"
    unit = "unit"


def box_key_rank(key: Optional[str]) -> Optional[int]:
    """Position of a package size key in Small < Medium < Large, None when unknown."""
    if not key:
        return None
    return _BOX_KEY_RANK.get(str(key).strip().lower())


def calc_usable_liters(dims: Tuple[float, float, float], headroom: float) -> float:
    """cm³ -> liters with the headroom fraction left empty, rounded to 0.1 L."""
    l, w, h = dims
    return round(l * w * h * (1 - headroom) / 1000, 1)


def _require_positive(name: str, value: float) -> float:
    if value is None or value <= 0:
        raise ValueError(f"{name} must be positive, got {value!r}")
    return float(value)


@dataclass(frozen=True)
class OrderLine:
    item_id: str
    quantity_kg: Optional[float] = None
    units: Optional[int] = None

    @property
    def mode(self) -> QuantityMode:
        return QuantityMode.kg if self.quantity_kg is not None else QuantityMode.unit

    @property
    def quantity(self) -> float:
        if self.mode == QuantityMode.kg:
            return float(self.quantity_kg or 0)
        return float(self.units or 0)


@dataclass(frozen=True)
class ItemDescriptor:
    id: str
    name: str = ""
    category: str = ""
    type: str = ""
    variety: str = ""
    avg_weight_per_unit_grams: Optional[float] = None

    @property
    def unit_weight_kg(self) -> Optional[float]:
        g = self.avg_weight_per_unit_grams
        if g is None or g <= 0:
            return None
        return g / 1000


@dataclass(frozen=True)
class ItemPackingOverride:
    fragility: Optional[Fragility] = None
    allow_mixing: Optional[bool] = None
    requires_vented_box: Optional[bool] = None
    min_box_type: Optional[str] = None
    max_weight_per_box_kg: Optional[float] = None
    max_kg_per_bag: Optional[float] = None
    density_kg_per_liter: Optional[float] = None
    unit_volume_liters: Optional[float] = None


@dataclass(frozen=True)
class BoxType:
    key: str
    inner_dims_cm: Tuple[float, float, float]
    max_weight_kg: float
    vented: bool = False
    headroom_fraction: float = DEFAULT_HEADROOM
    usable_liters: Optional[float] = None
    max_distinct_skus: Optional[int] = None
    mixing_allowed: bool = True
    name: Optional[str] = None

    def __post_init__(self) -> None:
        rank = box_key_rank(self.key)
        if rank is None:
            raise ValueError(
                f"package size key must be one of {BOX_KEY_ORDER}, got {self.key!r}"
            )
        object.__setattr__(self, "key", BOX_KEY_ORDER[rank])
        if len(self.inner_dims_cm) != 3:
            raise ValueError("inner_dims_cm must hold (l, w, h)")
        dims = tuple(
            _require_positive(f"inner_dims_cm.{axis}", v)
            for axis, v in zip("lwh", self.inner_dims_cm)
        )
        object.__setattr__(self, "inner_dims_cm", dims)
        object.__setattr__(
            self, "max_weight_kg", _require_positive("max_weight_kg", self.max_weight_kg)
        )
        if not 0 <= self.headroom_fraction < MAX_HEADROOM + EPS:
            raise ValueError(
                f"headroom_fraction must be within [0, {MAX_HEADROOM}], got {self.headroom_fraction!r}"
            )
        if self.usable_liters is None:
            object.__setattr__(
                self, "usable_liters", calc_usable_liters(dims, self.headroom_fraction)
            )
        object.__setattr__(
            self, "usable_liters", _require_positive("usable_liters", self.usable_liters)
        )
        if self.max_distinct_skus is not None and self.max_distinct_skus < 1:
            raise ValueError("max_distinct_skus must be at least 1 when set")

    @property
    def rank(self) -> int:
        return box_key_rank(self.key)

    @property
    def label(self) -> str:
        return f"{self.key}{' (vented)' if self.vented else ''}"


@dataclass(frozen=True)
class PackingProfile:
    """Physical handling attributes of one item after overrides are applied."""

    bucket: str
    density_kg_per_liter: float
    fragility: Fragility
    allow_mixing: bool
    requires_vented: bool
    liters_per_unit: float
    max_kg_per_bag: float
    min_box_key: Optional[str] = None
    max_weight_per_box_kg: Optional[float] = None
    unit_volume_liters: Optional[float] = None


@dataclass(frozen=True)
class Piece:
    item_id: str
    item_name: str
    kind: PieceKind
    mode: QuantityMode
    liters: float
    fragility: Fragility
    allow_mixing: bool
    requires_vented: bool
    kg: Optional[float] = None
    units: Optional[int] = None
    min_box_key: Optional[str] = None
    max_weight_per_box_kg: Optional[float] = None

    @property
    def est_weight_kg(self) -> float:
        if self.kg is not None:
            return self.kg
        return round(self.liters * FALLBACK_DENSITY_KG_PER_LITER, 3)

    @property
    def fragility_rank(self) -> int:
        return FRAGILITY_RANK[self.fragility]

    @property
    def min_box_rank(self) -> Optional[int]:
        return box_key_rank(self.min_box_key)


@dataclass
class OpenBox:
    box_type: BoxType
    contents: List[Piece] = field(default_factory=list)
    liters: float = 0.0
    weight_kg: float = 0.0
    weight_by_item: Dict[str, float] = field(default_factory=dict)

    def add(self, piece: Piece) -> None:
        self.contents.append(piece)
        self.liters += piece.liters
        self.weight_kg += piece.est_weight_kg
        self.weight_by_item[piece.item_id] = (
            self.weight_by_item.get(piece.item_id, 0.0) + piece.est_weight_kg
        )

    @property
    def item_ids(self) -> List[str]:
        return list(self.weight_by_item)

    @property
    def is_empty(self) -> bool:
        return not self.contents


@dataclass(frozen=True)
class EscalationPolicy:
    """Thresholds for opening a larger box than the smallest feasible one."""

    fill_threshold: float = 0.5
    lookahead: int = 2


DEFAULT_ESCALATION = EscalationPolicy()


@dataclass
class PlanBox:
    box_number: int
    box_type_key: str
    vented: bool
    estimated_fill_liters: float
    estimated_weight_kg: float
    fill_fraction: float
    contents: List[Piece] = field(default_factory=list)


@dataclass
class ItemSummary:
    item_id: str
    item_name: str
    bag_count: int = 0
    bundle_count: int = 0
    total_kg: Optional[float] = None
    total_units: Optional[int] = None


@dataclass
class PlanSummary:
    total_boxes: int
    per_item: List[ItemSummary] = field(default_factory=list)
    warnings: List[str] = field(default_factory=list)


@dataclass
class PackingPlan:
    boxes: List[PlanBox] = field(default_factory=list)
    summary: PlanSummary = field(default_factory=lambda: PlanSummary(total_boxes=0))
