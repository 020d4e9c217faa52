# faber/telemetry/__init__.py
from .aggregator import TelemetryLog, TelemetryEvent, classify, describe_for_user

__all__ = ["TelemetryLog", "TelemetryEvent", "classify", "describe_for_user"]
