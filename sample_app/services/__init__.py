"""business logic layer"""

from .work_simulator import WorkSimulator

__all__ = ["WorkSimulator"]
