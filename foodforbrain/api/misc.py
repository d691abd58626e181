from fastapi import APIRouter, Request

router = APIRouter()


@router.get("/health")
def health(request: Request):
    """Liveness check; also reports whether the processing worker is up."""
    task_manager = getattr(request.app.state, "task_manager", None)
    return {
        "status": "ok",
        "worker_running": bool(task_manager is not None and task_manager.is_running),
    }
