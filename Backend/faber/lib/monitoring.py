# faber/lib/monitoring.py
from fastapi import FastAPI
from prometheus_client.registry import CollectorRegistry as Registry
from prometheus_client import Counter, Gauge
from prometheus_fastapi_instrumentator import Instrumentator
from faber.core.logging import log

# Separate registry so repeated app imports in tests don't collide
registry = Registry()

active_preview_engines = Gauge(
    'faber_active_preview_engines',
    'Number of projects with a live preview engine',
    registry=registry
)

preview_outcomes = Counter(
    'faber_preview_outcomes_total',
    'Terminal preview session outcomes',
    ['status', 'kind'],
    registry=registry
)

generation_outcomes = Counter(
    'faber_generation_outcomes_total',
    'Accepted generations by ladder strategy',
    ['strategy'],
    registry=registry
)


def set_active_preview_engines(n: int):
    """Sets the value of the active preview engines gauge."""
    active_preview_engines.set(n)


def record_preview_outcome(status: str, kind: str = "none"):
    preview_outcomes.labels(status=status, kind=kind).inc()


def record_generation_outcome(strategy: str):
    generation_outcomes.labels(strategy=strategy).inc()


def register_monitoring(app: FastAPI):
    """
    Registers Prometheus monitoring on the FastAPI app and exposes /metrics.
    """
    instrumentator = Instrumentator(
        excluded_handlers=["/metrics"],
        registry=registry
    ).instrument(app)

    instrumentator.expose(app, include_in_schema=False, should_gzip=True)

    log("MONITORING", "Prometheus instrumentation registered at /metrics.")
