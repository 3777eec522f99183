"""Logging and Prometheus instrumentation for EventLens."""
