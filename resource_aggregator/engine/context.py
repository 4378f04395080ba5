from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, List, Mapping, MutableMapping

from .aggregator import SizeAccumulator

JsonMapping = MutableMapping[str, Any]
InputPayload = Mapping[str, Any]
OutputPayload = Dict[str, Any]

INPUT_FIELDS = {"input_files", "extra_args"}
OUTPUT_FIELDS = {"output_files", "is_success", "error_message"}


@dataclass
class StepRecord:
    """What one step consumed and produced, with the bytes it added to the run totals."""

    name: str
    input_files: List[str]
    output_files: List[str] = field(default_factory=list)
    is_success: bool = True
    original: int = 0
    aggregated: int = 0

    def as_payload(self) -> Dict[str, Any]:
        return {
            "step": self.name,
            "is_success": self.is_success,
            "original": self.original,
            "aggregated": self.aggregated,
        }

    def __str__(self) -> str:
        parts = [self.name, *self.input_files]
        if self.output_files:
            parts += ["->", *self.output_files]
        return " ".join(parts)


class Context:
    """Build-run state shared by every step: working directory, step records, size totals."""

    def __init__(
        self,
        path: str | Path | None = None,
        *,
        sizes: SizeAccumulator | None = None,
    ) -> None:
        self.path = Path(path).resolve() if path else Path.cwd()
        self.history: List[StepRecord] = []
        self.sizes = sizes if sizes is not None else SizeAccumulator()

    def resolve(self, path: str | Path) -> Path:
        candidate = Path(path).expanduser()
        if not candidate.is_absolute():
            candidate = self.path / candidate
        return candidate
