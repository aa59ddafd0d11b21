from fastapi import APIRouter, HTTPException

from orderpack import config, factories, schemas
from orderpack.logger import logger
from orderpack.model import compute_packing, estimate_containers_for_lines

router = APIRouter(tags=["Packing"])


@router.post("/plan", response_model=schemas.PackingPlanOut, response_model_exclude_none=True)
def create_packing_plan(payload: schemas.PackingRequest):
    """Packing plan for a single order."""
    logger.info(f"packing plan request: {len(payload.lines)} line(s)")
    try:
        master = factories.build_master_data(payload)
        plan = compute_packing(
            factories.build_order_lines(payload.lines),
            master["items_by_id"],
            master["box_types"],
            master["overrides_by_id"],
            config.escalation_policy(),
        )
        return factories.plan_to_schema(plan)
    except HTTPException:
        raise
    except ValueError as e:
        logger.warning(f"packing plan rejected: {e}")
        raise HTTPException(status_code=400, detail=str(e))
    except Exception as e:
        logger.exception("Error in packing plan")
        raise HTTPException(status_code=500, detail=f"Error in packing plan: {e}")


@router.post(
    "/containers", response_model=schemas.ContainerPlanOut, response_model_exclude_none=True
)
def create_container_plan(payload: schemas.ContainerPlanRequest):
    """Containers needed to bring in a farmer order."""
    try:
        plan = estimate_containers_for_lines(
            factories.FarmerOrderLineFactory().create_many(payload.lines),
            factories.ItemFactory().create_index(payload.items),
            factories.ContainerSizeFactory().create_many(payload.containers),
            factories.OverrideFactory().create_index(payload.overrides),
        )
        return factories.container_plan_to_schema(plan)
    except HTTPException:
        raise
    except ValueError as e:
        logger.warning(f"container plan rejected: {e}")
        raise HTTPException(status_code=400, detail=str(e))
    except Exception as e:
        logger.exception("Error in container plan")
        raise HTTPException(status_code=500, detail=f"Error in container plan: {e}")
