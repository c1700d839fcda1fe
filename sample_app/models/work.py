from pydantic import BaseModel, ConfigDict, Field


class WorkOutcome(BaseModel):
    """result of a single simulated unit of work"""

    model_config = ConfigDict(frozen=True)

    status_code: int = Field(description="http status code to respond with")
    body: str = Field(description="plain text response body")
    latency_ms: int = Field(ge=0, description="simulated work latency in milliseconds")

    @property
    def failed(self) -> bool:
        return self.status_code >= 500
