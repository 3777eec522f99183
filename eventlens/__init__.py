"""EventLens: lifecycle event ingestion with derived operational metrics."""

__version__ = "0.3.0"
