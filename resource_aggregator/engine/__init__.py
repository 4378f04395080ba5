"""Core primitives for aggregating CSS and JavaScript resources."""

from .aggregator import Aggregator, SizeAccumulator, UnsupportedEncodingError
from .config import AggregationConfig, ResourceSet
from .context import Context, StepRecord
from .functors import AggregateFunctor, Functor, FunctorExecutionError
from .paths import aggregated_path, path_with_suffix, remove_extension, split_extension
from .pipeline import pipe_process

__all__ = [
    "Aggregator",
    "SizeAccumulator",
    "UnsupportedEncodingError",
    "AggregationConfig",
    "ResourceSet",
    "Context",
    "StepRecord",
    "Functor",
    "AggregateFunctor",
    "FunctorExecutionError",
    "aggregated_path",
    "path_with_suffix",
    "remove_extension",
    "split_extension",
    "pipe_process",
]
