from typing import Annotated

from fastapi import Depends, Request

from .services.work_simulator import WorkSimulator


def get_work_simulator(request: Request) -> WorkSimulator:
    """dependency injection for fastapi endpoints"""
    return request.app.state.work_simulator


WorkSimulatorDep = Annotated[WorkSimulator, Depends(get_work_simulator)]
