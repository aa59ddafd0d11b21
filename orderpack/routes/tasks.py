from fastapi import APIRouter, HTTPException
from celery.result import AsyncResult

from orderpack import schemas
from orderpack.celery.tasks import planOrdersTask
from orderpack.celery_app import celery_app

router = APIRouter(tags=["Celery Tasks"])


@router.post("/plan-batch", response_model=schemas.BatchTaskCreated)
def create_plan_batch_task(payload: schemas.BatchPackingRequest):
    """Queue packing plans for a batch of orders"""
    if not payload.orders:
        raise HTTPException(status_code=400, detail="At least one order is required")

    task = planOrdersTask.delay(payload.model_dump(mode="json", by_alias=True))
    return schemas.BatchTaskCreated(
        task_id=task.id, status="Task created", orders=len(payload.orders)
    )


@router.get("/")
def get_task_status(task_id: str):
    """Get the status of a task"""
    task_result = AsyncResult(task_id, app=celery_app)

    if task_result.state == "PENDING":
        response = {
            "taskId": task_id,
            "status": task_result.state,
            "message": "Task is waiting to be processed",
        }
    elif task_result.state == "FAILURE":
        response = {
            "taskId": task_id,
            "status": task_result.state,
            "message": "Task failed",
            "error": str(task_result.info),
        }
    elif task_result.state == "SUCCESS":
        response = {
            "taskId": task_id,
            "status": task_result.state,
            "result": task_result.result,
            "message": "Task completed successfully",
        }
    else:
        response = {
            "taskId": task_id,
            "status": task_result.state,
            "message": f"Task is {task_result.state.lower()}",
        }

    return response


@router.get("/health")
def health_check():
    """Health check endpoint"""
    return {"status": "healthy", "service": "orderpack"}
