"""custom exceptions for the sample service"""


class SampleAppException(Exception):
    """base exception for the sample service"""

    def __init__(self, message: str, details: dict | None = None):
        self.message = message
        self.details = details or {}
        super().__init__(self.message)


class TelemetryInitializationError(SampleAppException):
    """telemetry pipeline could not be built, the service must not start"""
