from __future__ import annotations

import os

from opentelemetry import metrics, trace
from opentelemetry.exporter.otlp.proto.http.metric_exporter import OTLPMetricExporter
from opentelemetry.exporter.otlp.proto.http.trace_exporter import OTLPSpanExporter
from opentelemetry.sdk.metrics import MeterProvider
from opentelemetry.sdk.metrics.export import (
    ConsoleMetricExporter,
    MetricReader,
    PeriodicExportingMetricReader,
)
from opentelemetry.sdk.resources import Resource
from opentelemetry.sdk.trace import TracerProvider
from opentelemetry.sdk.trace.export import BatchSpanProcessor, ConsoleSpanExporter

_initialized_services: set[str] = set()


def _build_resource(service_name: str) -> Resource:
    return Resource.create(
        {
            "service.name": service_name,
            "deployment.environment": os.getenv("APP_ENV", "local"),
        }
    )


def _build_tracer_provider(resource: Resource) -> TracerProvider:
    tracer_provider = TracerProvider(resource=resource)
    mode = os.getenv("OTEL_TRACES_EXPORTER", "console")
    if mode == "otlp":
        tracer_provider.add_span_processor(BatchSpanProcessor(OTLPSpanExporter()))
    elif mode == "console":
        tracer_provider.add_span_processor(BatchSpanProcessor(ConsoleSpanExporter()))
    return tracer_provider


def _build_metric_readers() -> list[MetricReader]:
    mode = os.getenv("OTEL_METRICS_EXPORTER", "console")
    if mode == "otlp":
        return [PeriodicExportingMetricReader(OTLPMetricExporter())]
    if mode == "console":
        return [PeriodicExportingMetricReader(ConsoleMetricExporter())]
    return []


def configure_otel(service_name: str) -> None:
    if service_name in _initialized_services:
        return

    resource = _build_resource(service_name)
    trace.set_tracer_provider(_build_tracer_provider(resource))
    metrics.set_meter_provider(
        MeterProvider(resource=resource, metric_readers=_build_metric_readers())
    )

    _initialized_services.add(service_name)
