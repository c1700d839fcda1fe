from fastapi import APIRouter, HTTPException, Request
from fastapi.responses import PlainTextResponse

from ...observability.metrics import metrics_endpoint

router = APIRouter(tags=["health"])


@router.get("/healthz", response_class=PlainTextResponse)
async def healthz():
    """liveness check, never traced"""
    return PlainTextResponse("OK")


@router.get("/metrics")
async def metrics(request: Request):
    """prometheus metrics endpoint"""
    if not request.app.state.settings.enable_metrics:
        raise HTTPException(status_code=404, detail="metrics disabled")
    return metrics_endpoint()
