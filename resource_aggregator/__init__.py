"""Aggregate CSS and JavaScript files into single build artifacts."""

from .engine import (
    AggregateFunctor,
    AggregationConfig,
    Aggregator,
    Context,
    Functor,
    FunctorExecutionError,
    ResourceSet,
    SizeAccumulator,
    UnsupportedEncodingError,
    pipe_process,
)

__all__ = [
    "Context",
    "Functor",
    "AggregateFunctor",
    "FunctorExecutionError",
    "Aggregator",
    "SizeAccumulator",
    "UnsupportedEncodingError",
    "AggregationConfig",
    "ResourceSet",
    "pipe_process",
]
