from typing import Any, TypedDict

from orderpack import schemas
from orderpack.model import capacity, entities

from abc import ABC, abstractmethod


class EngineAbstractFactory(ABC):
    """Abstract factory turning request schemas into engine entities."""

    @abstractmethod
    def create_entity(self, data: Any) -> Any:
        pass

    def create_many(self, rows: list) -> list:
        return [self.create_entity(row) for row in rows]


class BoxTypeFactory(EngineAbstractFactory):
    def check_valid_size(self, box: schemas.BoxTypeIn) -> bool:
        """True when the declared usable volume is larger than the box itself."""
        dims = box.inner_dimensions_cm
        inner_liters = dims.l * dims.w * dims.h / 1000
        return box.usable_liters is not None and box.usable_liters > inner_liters

    def create_entity(self, data: schemas.BoxTypeIn) -> entities.BoxType:
        if self.check_valid_size(data):
            raise ValueError(
                f"package size {data.key}: usable liters cannot exceed the inner volume."
            )
        dims = data.inner_dimensions_cm
        return entities.BoxType(
            key=data.key,
            name=data.name,
            inner_dims_cm=(dims.l, dims.w, dims.h),
            headroom_fraction=data.headroom_fraction,
            usable_liters=data.usable_liters,
            max_weight_kg=data.max_weight_kg,
            vented=data.vented,
            max_distinct_skus=data.max_distinct_skus,
            mixing_allowed=True if data.mixing_allowed is None else data.mixing_allowed,
        )

    def create_many(self, rows: list[schemas.BoxTypeIn]) -> list[entities.BoxType]:
        box_types = super().create_many(rows)
        seen = set()
        for box_type in box_types:
            pair = (box_type.key, box_type.vented)
            if pair in seen:
                raise ValueError(
                    f"duplicate package size {box_type.key} (vented={box_type.vented})."
                )
            seen.add(pair)
        return box_types


class ItemFactory(EngineAbstractFactory):
    def create_entity(self, data: schemas.ItemIn) -> entities.ItemDescriptor:
        return entities.ItemDescriptor(
            id=data.id,
            name=data.name,
            category=data.category,
            type=data.type,
            variety=data.variety,
            avg_weight_per_unit_grams=data.avg_weight_per_unit_grams,
        )

    def create_index(self, rows: list[schemas.ItemIn]) -> dict[str, entities.ItemDescriptor]:
        return {item.id: item for item in self.create_many(rows)}


class OverrideFactory(EngineAbstractFactory):
    def create_entity(
        self, data: schemas.ItemPackingOverrideIn
    ) -> entities.ItemPackingOverride:
        return entities.ItemPackingOverride(**data.model_dump(by_alias=False))

    def create_index(
        self, rows: dict[str, schemas.ItemPackingOverrideIn]
    ) -> dict[str, entities.ItemPackingOverride]:
        return {str(item_id): self.create_entity(row) for item_id, row in rows.items()}


class OrderLineFactory(EngineAbstractFactory):
    def create_entity(self, data: schemas.OrderLineIn) -> entities.OrderLine:
        return entities.OrderLine(
            item_id=data.item_id, quantity_kg=data.quantity_kg, units=data.units
        )


class ContainerSizeFactory(EngineAbstractFactory):
    def create_entity(self, data: schemas.ContainerSizeIn) -> capacity.ContainerSize:
        return capacity.ContainerSize(
            key=data.key,
            name=data.name,
            usable_liters=data.usable_liters,
            max_weight_kg=data.max_weight_kg,
            vented=data.vented,
        )


class FarmerOrderLineFactory(EngineAbstractFactory):
    def create_entity(self, data: schemas.FarmerOrderLineIn) -> capacity.FarmerOrderLine:
        return capacity.FarmerOrderLine(
            item_id=data.item_id,
            estimated_kg=data.estimated_kg,
            committed_kg=data.committed_kg,
        )


class MasterData(TypedDict):
    items_by_id: dict[str, entities.ItemDescriptor]
    box_types: list[entities.BoxType]
    overrides_by_id: dict[str, entities.ItemPackingOverride]


def build_master_data(
    request: schemas.PackingRequest | schemas.BatchPackingRequest,
) -> MasterData:
    return {
        "items_by_id": ItemFactory().create_index(request.items),
        "box_types": BoxTypeFactory().create_many(request.box_types),
        "overrides_by_id": OverrideFactory().create_index(request.overrides),
    }


def build_order_lines(rows: list[schemas.OrderLineIn]) -> list[entities.OrderLine]:
    return OrderLineFactory().create_many(rows)


def piece_to_schema(piece: entities.Piece) -> schemas.PlanPieceOut:
    return schemas.PlanPieceOut(
        item_id=piece.item_id,
        item_name=piece.item_name or None,
        piece_kind=piece.kind.value,
        mode=piece.mode.value,
        quantity_kg=piece.kg if piece.mode == entities.QuantityMode.kg else None,
        units=piece.units,
        liters=piece.liters,
        estimated_weight_kg=piece.est_weight_kg,
    )


def plan_to_schema(plan: entities.PackingPlan) -> schemas.PackingPlanOut:
    return schemas.PackingPlanOut(
        boxes=[
            schemas.PlanBoxOut(
                box_number=box.box_number,
                box_type_key=box.box_type_key,
                vented=box.vented,
                estimated_fill_liters=box.estimated_fill_liters,
                estimated_weight_kg=box.estimated_weight_kg,
                fill_fraction=box.fill_fraction,
                contents=[piece_to_schema(p) for p in box.contents],
            )
            for box in plan.boxes
        ],
        summary=schemas.PlanSummaryOut(
            total_boxes=plan.summary.total_boxes,
            per_item=[
                schemas.PlanItemSummaryOut(
                    item_id=s.item_id,
                    item_name=s.item_name or None,
                    bag_count=s.bag_count,
                    bundle_count=s.bundle_count,
                    total_kg=s.total_kg,
                    total_units=s.total_units,
                )
                for s in plan.summary.per_item
            ],
            warnings=list(plan.summary.warnings),
        ),
    )


def plan_to_dict(plan: entities.PackingPlan) -> dict:
    """camelCase JSON-ready plan with unset optional fields left out."""
    return plan_to_schema(plan).model_dump(mode="json", by_alias=True, exclude_none=True)


def container_plan_to_schema(plan: capacity.ContainerPlan) -> schemas.ContainerPlanOut:
    return schemas.ContainerPlanOut(
        lines=[
            schemas.ContainerPlanLineOut(
                item_id=line.item_id,
                item_name=line.item_name or None,
                total_kg=line.total_kg,
                container_key=line.container_key,
                container_name=line.container_name,
                capacity_kg_per_container=line.capacity_kg_per_container,
                containers_needed=line.containers_needed,
                limiting_factor=line.limiting_factor,
            )
            for line in plan.lines
        ],
        total_containers=plan.total_containers,
        warnings=list(plan.warnings),
    )
