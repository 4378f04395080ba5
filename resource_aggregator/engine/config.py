from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import Sequence, Tuple

DEFAULT_ENCODING = "utf-8"


@dataclass(frozen=True)
class AggregationConfig:
    """
    Options for one aggregation.

    ``prepended_file`` is written first and followed by a line terminator.
    ``with_delimiters`` inserts ``;`` between fragments so that concatenated
    scripts stay valid. ``remove_included`` deletes the inputs once the output
    has been written.
    """

    output_file: Path
    prepended_file: Path | None = None
    with_delimiters: bool = False
    remove_included: bool = False

    def __post_init__(self) -> None:
        object.__setattr__(self, "output_file", Path(self.output_file))
        if self.prepended_file is not None:
            object.__setattr__(self, "prepended_file", Path(self.prepended_file))


@dataclass(frozen=True)
class ResourceSet:
    """Ordered input files, the encoding they are read with, and what to do with them."""

    files: Tuple[Path, ...]
    aggregation: AggregationConfig
    encoding: str = DEFAULT_ENCODING

    def __post_init__(self) -> None:
        object.__setattr__(self, "files", tuple(Path(f) for f in self.files))

    @classmethod
    def build(
        cls,
        files: Sequence[str | Path],
        output_file: str | Path,
        *,
        encoding: str = DEFAULT_ENCODING,
        prepended_file: str | Path | None = None,
        with_delimiters: bool = False,
        remove_included: bool = False,
    ) -> "ResourceSet":
        config = AggregationConfig(
            output_file=Path(output_file),
            prepended_file=Path(prepended_file) if prepended_file is not None else None,
            with_delimiters=with_delimiters,
            remove_included=remove_included,
        )
        return cls(files=tuple(files), aggregation=config, encoding=encoding)

    @property
    def file_count(self) -> int:
        count = len(self.files)
        if self.aggregation.prepended_file is not None:
            count += 1
        return count
