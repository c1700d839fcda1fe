"""Tests for the service identity attached to exported telemetry."""

import pytest
from pydantic import ValidationError

from sample_app.config import Settings
from sample_app.models.resource import ResourceDescriptor


def test_resource_carries_service_identity(resource):
    attributes = resource.to_resource().attributes

    assert attributes["service.name"] == "sample-app-test"
    assert attributes["service.version"] == "9.9.9"


def test_descriptor_is_immutable(resource):
    with pytest.raises(ValidationError):
        resource.service_name = "other"


def test_descriptor_rejects_empty_name():
    with pytest.raises(ValidationError):
        ResourceDescriptor(service_name="", service_version="1.0.0")


def test_from_settings_uses_defaults():
    descriptor = ResourceDescriptor.from_settings(Settings(_env_file=None))

    assert descriptor.service_name == "sample-app"
    assert descriptor.service_version == "1.0.0"


def test_spans_share_the_resource(telemetry):
    assert telemetry.tracer_provider.resource.attributes["service.name"] == "sample-app-test"
