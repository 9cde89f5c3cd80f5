"""Estimation engine: hour matrix lookup and aggregation."""
from estimator.engine.aggregator import EstimationSummary, estimated_days, format_days, summarize, total_hours
from estimator.engine.calculator import (
    EstimationCalculator,
    HourMappingProvider,
    HourMappingTable,
    LineEstimate,
    MissingMappingPolicy,
)

__all__ = [
    "EstimationCalculator",
    "EstimationSummary",
    "HourMappingProvider",
    "HourMappingTable",
    "LineEstimate",
    "MissingMappingPolicy",
    "estimated_days",
    "format_days",
    "summarize",
    "total_hours",
]
