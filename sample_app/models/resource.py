from opentelemetry.sdk.resources import SERVICE_NAME, SERVICE_VERSION, Resource
from pydantic import BaseModel, ConfigDict, Field

from ..config import Settings


class ResourceDescriptor(BaseModel):
    """static service identity attached to every exported signal"""

    model_config = ConfigDict(frozen=True)

    service_name: str = Field(min_length=1, description="value of service.name")
    service_version: str = Field(min_length=1, description="value of service.version")

    @classmethod
    def from_settings(cls, settings: Settings) -> "ResourceDescriptor":
        return cls(service_name=settings.service_name, service_version=settings.service_version)

    def to_resource(self) -> Resource:
        """otel resource shared by the tracer and meter providers"""
        return Resource.create(
            {
                SERVICE_NAME: self.service_name,
                SERVICE_VERSION: self.service_version,
            }
        )
