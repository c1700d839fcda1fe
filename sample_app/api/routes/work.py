from fastapi import APIRouter
from fastapi.responses import PlainTextResponse

from ...dependencies import WorkSimulatorDep

router = APIRouter(tags=["work"])


# the route name becomes the name of the request root span
@router.get("/work", name="work", response_class=PlainTextResponse)
async def work(simulator: WorkSimulatorDep):
    """
    simulate a unit of work

    - sleeps for a random latency inside nested spans
    - fails with 500 for roughly one request in five
    """
    outcome = await simulator.handle()
    return PlainTextResponse(outcome.body, status_code=outcome.status_code)
