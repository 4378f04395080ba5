from __future__ import annotations

import logging
from typing import List, Sequence

from .context import Context, INPUT_FIELDS, InputPayload, OutputPayload, StepRecord
from .functors import Functor, FunctorExecutionError, check_fields

logger = logging.getLogger(__name__)


def pipe_process(
    functors: Sequence[Functor],
    context: Context,
    input_json: InputPayload | None = None,
) -> OutputPayload:
    """
    Run build steps in order, each step aggregating the previous step's output files.

    The returned payload is the last step's result plus ``steps``, the size
    record of every step that ran, and ``sizes``, the run totals from
    ``context.sizes``. A failing step stops the run; its payload carries
    ``failed_at`` with the step name.
    """
    if not functors:
        raise ValueError("pipe_process requires at least one functor.")

    payload = dict(input_json or {})
    check_fields(payload, INPUT_FIELDS, "Pipeline")
    first_record = len(context.history)

    for functor in functors:
        result = dict(functor(context, payload))

        if not result.get("is_success"):
            logger.error("Step %s failed: %s", functor.name, result.get("error_message") or "Unknown error.")
            result.setdefault("failed_at", functor.name)
            return _with_sizes(result, context, context.history[first_record:])

        output_files = list(result.get("output_files") or [])
        if not output_files:
            raise FunctorExecutionError(f"Step '{functor.name}' produced no output files.")
        payload = {"input_files": output_files}

    records = context.history[first_record:]
    logger.info(
        "%d steps finished: %d original bytes, %d aggregated bytes.",
        len(records),
        sum(record.original for record in records),
        sum(record.aggregated for record in records),
    )
    return _with_sizes(result, context, records)


def _with_sizes(result: OutputPayload, context: Context, records: List[StepRecord]) -> OutputPayload:
    result["steps"] = [record.as_payload() for record in records]
    result["sizes"] = {"original": context.sizes.original, "aggregated": context.sizes.aggregated}
    return result
