"""pydantic models for telemetry identity and work outcomes"""

from .resource import ResourceDescriptor
from .work import WorkOutcome

__all__ = ["ResourceDescriptor", "WorkOutcome"]
