from __future__ import annotations

import dataclasses
import logging
from abc import ABC, abstractmethod
from typing import Any, Collection, Mapping, Sequence

from .aggregator import Aggregator
from .config import DEFAULT_ENCODING, AggregationConfig, ResourceSet
from .context import (
    Context,
    INPUT_FIELDS,
    OUTPUT_FIELDS,
    InputPayload,
    JsonMapping,
    OutputPayload,
    StepRecord,
)

logger = logging.getLogger(__name__)


class FunctorExecutionError(RuntimeError):
    """Raised when a functor produces malformed data."""


def check_fields(
    payload: Mapping[str, Any],
    allowed: Collection[str],
    owner: str,
    *,
    required: Collection[str] = (),
) -> None:
    """Raise ``FunctorExecutionError`` when ``payload`` has unknown or missing keys."""
    unknown = set(payload) - set(allowed)
    if unknown:
        raise FunctorExecutionError(f"{owner} got unsupported fields: {', '.join(sorted(unknown))}")
    missing = set(required) - set(payload)
    if missing:
        raise FunctorExecutionError(f"{owner} is missing fields: {', '.join(sorted(missing))}")


class Functor(ABC):
    """
    Base class for build steps.

    A step takes ``input_files``/``extra_args`` and returns ``output_files``,
    ``is_success`` and ``error_message``. Each call is recorded on the
    context together with the bytes it added to ``context.sizes``.
    """

    def __init__(
        self,
        name: str,
        *,
        default_input_files: Sequence[str] | None = None,
        default_extra_args: Sequence[str] | None = None,
    ) -> None:
        self.name = name
        self.default_input_files = list(default_input_files or [])
        self.default_extra_args = list(default_extra_args or [])

    def __call__(self, context: Context, payload: InputPayload | None = None) -> OutputPayload:
        payload = payload or {}
        check_fields(payload, INPUT_FIELDS, f"Step '{self.name}'")
        normalized: JsonMapping = {
            "input_files": list(payload.get("input_files") or self.default_input_files),
            "extra_args": list(payload.get("extra_args") or self.default_extra_args),
        }

        original, aggregated = context.sizes.original, context.sizes.aggregated
        output = self.execute(context, normalized)
        if not isinstance(output, Mapping):
            raise FunctorExecutionError(f"Step '{self.name}' returned a non-mapping payload.")
        check_fields(
            output,
            OUTPUT_FIELDS,
            f"Step '{self.name}' output",
            required=OUTPUT_FIELDS - {"error_message"},
        )

        context.history.append(
            StepRecord(
                name=self.name,
                input_files=normalized["input_files"],
                output_files=list(output.get("output_files") or []) if output.get("is_success") else [],
                is_success=bool(output.get("is_success")),
                original=context.sizes.original - original,
                aggregated=context.sizes.aggregated - aggregated,
            )
        )
        return output

    @abstractmethod
    def execute(self, context: Context, payload: JsonMapping) -> OutputPayload:
        """Perform the step's work using normalized JSON input."""


class AggregateFunctor(Functor):
    """
    Functor that aggregates its input files into one output file.

    Relative paths are resolved against the context path. ``extra_args`` may
    carry ``-o <path>`` to override the configured output file for one call.
    Size totals accumulate on ``context.sizes``.
    """

    def __init__(
        self,
        name: str,
        config: AggregationConfig,
        *,
        encoding: str = DEFAULT_ENCODING,
        default_input_files: Sequence[str] | None = None,
        default_extra_args: Sequence[str] | None = None,
    ) -> None:
        super().__init__(
            name,
            default_input_files=default_input_files,
            default_extra_args=default_extra_args,
        )
        self.config = config
        self.encoding = encoding

    def execute(self, context: Context, payload: JsonMapping) -> OutputPayload:
        input_files = payload.get("input_files", [])

        try:
            resource_set = self._build_resource_set(context, payload)
        except ValueError as exc:
            return {
                "output_files": list(input_files),
                "is_success": False,
                "error_message": str(exc),
            }

        aggregator = Aggregator(context.sizes, log=logger)
        try:
            output_file = aggregator.run(resource_set)
        except (OSError, UnicodeError) as exc:
            return {
                "output_files": list(input_files),
                "is_success": False,
                "error_message": str(exc),
            }

        if output_file is None:
            return {
                "output_files": list(input_files),
                "is_success": False,
                "error_message": "Aggregation produced no output file.",
            }

        return {
            "output_files": [str(output_file)],
            "is_success": True,
            "error_message": None,
        }

    def _build_resource_set(self, context: Context, payload: JsonMapping) -> ResourceSet:
        output_file = self._output_from_args(payload.get("extra_args", [])) or self.config.output_file
        prepended = self.config.prepended_file
        config = dataclasses.replace(
            self.config,
            output_file=context.resolve(output_file),
            prepended_file=context.resolve(prepended) if prepended is not None else None,
        )
        files = [context.resolve(path) for path in payload.get("input_files", [])]
        return ResourceSet(files=tuple(files), aggregation=config, encoding=self.encoding)

    def _output_from_args(self, extra_args: Sequence[str]) -> str | None:
        args = list(extra_args)
        if not args:
            return None
        if len(args) == 2 and args[0] in ("-o", "--output"):
            return args[1]
        raise ValueError(f"Functor '{self.name}' accepts only '-o <path>', got: {' '.join(args)}")
