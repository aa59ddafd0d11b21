import time

from orderpack import config, factories, schemas
from orderpack.celery_app import celery_app
from orderpack.logger import logger
from orderpack.model import compute_packing_for_orders

__all__ = ["celery_app", "planOrdersTask"]


@celery_app.task(name="plan_orders", bind=True, time_limit=600)
def planOrdersTask(self, payload: dict) -> list[dict]:
    """Pack every order of a batch against one shared set of master data."""
    try:
        logger.info(f"Starting Plan Orders Task with id: {self.request.id}")
        request = schemas.BatchPackingRequest.model_validate(payload)
        master = factories.build_master_data(request)

        start_time = time.perf_counter()
        plans = compute_packing_for_orders(
            [
                (order.order_id, factories.build_order_lines(order.lines))
                for order in request.orders
            ],
            master["items_by_id"],
            master["box_types"],
            master["overrides_by_id"],
            config.escalation_policy(),
        )
        elapsed_time = time.perf_counter() - start_time
        logger.info(
            f"Plan Orders Task completed {len(plans)} order(s) after {elapsed_time} seconds"
        )

        return [
            {"orderId": order_id, "plan": factories.plan_to_dict(plan)}
            for order_id, plan in plans
        ]
    except Exception as e:
        logger.info(f"Plan Orders Task Failed: {str(e)}")
        raise e
