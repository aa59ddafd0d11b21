from pydantic import BaseModel, Field, ConfigDict, AliasChoices
from typing import Optional, Literal

from orderpack.model.entities import Fragility, DEFAULT_HEADROOM, MAX_HEADROOM


def to_camel(string: str) -> str:
    """Helper function to convert snake_case to camelCase"""
    parts = string.split("_")
    return parts[0] + "".join(word.capitalize() for word in parts[1:])


class CamelModel(BaseModel):
    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        str_strip_whitespace=True,
        coerce_numbers_to_str=True,
    )


# ----Master data-----
class ItemIn(CamelModel):
    id: str = Field(validation_alias=AliasChoices("id", "_id", "itemId"))
    name: str = ""
    category: str = ""
    type: str = ""
    variety: str = ""
    avg_weight_per_unit_grams: Optional[float] = Field(
        default=None,
        validation_alias=AliasChoices(
            "avg_weight_per_unit_grams", "avgWeightPerUnitGrams", "avgWeightPerUnitGr"
        ),
    )


class ItemPackingOverrideIn(CamelModel):
    fragility: Optional[Fragility] = None
    allow_mixing: Optional[bool] = None
    requires_vented_box: Optional[bool] = None
    min_box_type: Optional[str] = None
    max_weight_per_box_kg: Optional[float] = Field(
        default=None,
        validation_alias=AliasChoices(
            "max_weight_per_box_kg", "maxWeightPerBoxKg", "maxWeightPerPackageKg"
        ),
    )
    max_kg_per_bag: Optional[float] = None
    density_kg_per_liter: Optional[float] = Field(
        default=None,
        validation_alias=AliasChoices(
            "density_kg_per_liter", "densityKgPerLiter", "densityKgPerL"
        ),
    )
    unit_volume_liters: Optional[float] = Field(
        default=None,
        validation_alias=AliasChoices(
            "unit_volume_liters", "unitVolumeLiters", "unitVolLiters"
        ),
    )


class InnerDimensions(CamelModel):
    l: float
    w: float
    h: float


class BoxTypeIn(CamelModel):
    key: str
    name: Optional[str] = None
    inner_dimensions_cm: InnerDimensions = Field(
        validation_alias=AliasChoices(
            "inner_dimensions_cm", "innerDimensionsCm", "innerDimsCm"
        )
    )
    headroom_fraction: float = Field(
        default=DEFAULT_HEADROOM,
        ge=0,
        le=MAX_HEADROOM,
        validation_alias=AliasChoices(
            "headroom_fraction", "headroomFraction", "headroomPct"
        ),
    )
    usable_liters: Optional[float] = None
    max_weight_kg: float
    vented: bool = False
    max_distinct_skus: Optional[int] = Field(
        default=None,
        validation_alias=AliasChoices(
            "max_distinct_skus", "maxDistinctSkus", "maxSkusPerBox"
        ),
    )
    mixing_allowed: Optional[bool] = None


# ----Order-----
class OrderLineIn(CamelModel):
    item_id: str
    quantity_kg: Optional[float] = None
    units: Optional[int] = None


class PackingRequest(CamelModel):
    lines: list[OrderLineIn]
    items: list[ItemIn] = []
    box_types: list[BoxTypeIn] = Field(
        default=[],
        validation_alias=AliasChoices("box_types", "boxTypes", "packageSizes"),
    )
    overrides: dict[str, ItemPackingOverrideIn] = {}


class BatchOrderIn(CamelModel):
    order_id: str
    lines: list[OrderLineIn]


class BatchPackingRequest(CamelModel):
    orders: list[BatchOrderIn]
    items: list[ItemIn] = []
    box_types: list[BoxTypeIn] = Field(
        default=[],
        validation_alias=AliasChoices("box_types", "boxTypes", "packageSizes"),
    )
    overrides: dict[str, ItemPackingOverrideIn] = {}


# ----Packing plan-----
class PlanPieceOut(CamelModel):
    item_id: str
    item_name: Optional[str] = None
    piece_kind: Literal["bag", "bundle"]
    mode: Literal["kg", "unit"]
    quantity_kg: Optional[float] = None
    units: Optional[int] = None
    liters: float
    estimated_weight_kg: float


class PlanBoxOut(CamelModel):
    box_number: int
    box_type_key: str
    vented: bool
    estimated_fill_liters: float
    estimated_weight_kg: float
    fill_fraction: float
    contents: list[PlanPieceOut]


class PlanItemSummaryOut(CamelModel):
    item_id: str
    item_name: Optional[str] = None
    bag_count: int
    bundle_count: int
    total_kg: Optional[float] = None
    total_units: Optional[int] = None


class PlanSummaryOut(CamelModel):
    total_boxes: int
    per_item: list[PlanItemSummaryOut]
    warnings: list[str]


class PackingPlanOut(CamelModel):
    boxes: list[PlanBoxOut]
    summary: PlanSummaryOut


class BatchTaskCreated(CamelModel):
    task_id: str
    status: str
    orders: int


# ----Containers-----
class ContainerSizeIn(CamelModel):
    key: str
    name: Optional[str] = None
    usable_liters: float
    max_weight_kg: float
    vented: bool = True


class FarmerOrderLineIn(CamelModel):
    item_id: str
    estimated_kg: Optional[float] = None
    committed_kg: Optional[float] = None


class ContainerPlanRequest(CamelModel):
    lines: list[FarmerOrderLineIn]
    items: list[ItemIn] = []
    containers: list[ContainerSizeIn] = []
    overrides: dict[str, ItemPackingOverrideIn] = {}


class ContainerPlanLineOut(CamelModel):
    item_id: str
    item_name: Optional[str] = None
    total_kg: float
    container_key: str
    container_name: Optional[str] = None
    capacity_kg_per_container: float
    containers_needed: int
    limiting_factor: Literal["weight", "volume"]


class ContainerPlanOut(CamelModel):
    lines: list[ContainerPlanLineOut]
    total_containers: int
    warnings: list[str]
