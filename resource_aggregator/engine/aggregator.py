from __future__ import annotations

import codecs
import logging
import os
from dataclasses import dataclass
from pathlib import Path
from typing import BinaryIO, List

from .config import ResourceSet
from .paths import aggregated_path, path_with_suffix

logger = logging.getLogger(__name__)

DELIMITER = ";"


class UnsupportedEncodingError(OSError):
    """Raised when a resource set names an encoding that cannot be looked up."""


@dataclass
class SizeAccumulator:
    """Byte totals for one build run: what was read versus what was written."""

    original: int = 0
    aggregated: int = 0

    def add_original(self, path: str | Path) -> None:
        self.original += os.path.getsize(path)

    def add_aggregated(self, size: int) -> None:
        self.aggregated += size

    @property
    def savings(self) -> float:
        if not self.original:
            return 0.0
        return 1.0 - self.aggregated / self.original


class Aggregator:
    """Concatenates the files of a resource set into one output file."""

    def __init__(
        self,
        sizes: SizeAccumulator | None = None,
        *,
        log: logging.Logger | None = None,
    ) -> None:
        self.sizes = sizes if sizes is not None else SizeAccumulator()
        self.log = log or logger

    def run(self, resource_set: ResourceSet) -> Path | None:
        """Aggregate, drop the consumed inputs if asked to, and move the result into place."""
        working_file = self.aggregate(resource_set)
        self.delete_inputs_if_configured(resource_set)
        output_file = self.rename_to_final_output(working_file, resource_set.aggregation.output_file)
        self.log.info(
            "Aggregated %d bytes from %d original bytes (%.1f%% saved).",
            self.sizes.aggregated,
            self.sizes.original,
            self.sizes.savings * 100,
        )
        return output_file

    def aggregate(self, resource_set: ResourceSet) -> Path:
        """
        Write the prepended file and every input, in order, to the working file.

        The working file sits next to the configured output with the ``.aggr``
        extension, so an input that shares the output's name is never
        overwritten while it is still being read. Returns the working file.
        """
        encoder = self._get_encoder(resource_set.encoding)
        config = resource_set.aggregation
        files_count = resource_set.file_count

        if files_count > 1:
            self.log.info("Aggregation is running ...")

        output_file = self._prepare_working_file(config.output_file)
        size_before = output_file.stat().st_size
        has_content = size_before > 0
        if has_content:
            # appending to existing text: no second byte-order mark
            encoder.setstate(0)

        with output_file.open("ab") as out:
            if config.prepended_file is not None:
                self.sizes.add_original(config.prepended_file)
                content = self._read(config.prepended_file, resource_set.encoding)
                self._append(out, encoder, content + os.linesep)
                has_content = True

            for path in resource_set.files:
                self.sizes.add_original(path)
                content = self._read(path, resource_set.encoding)
                if not content:
                    continue
                if config.with_delimiters and has_content:
                    self._append(out, encoder, DELIMITER)
                self._append(out, encoder, content)
                has_content = True

            if has_content:
                self._append(out, encoder, "", final=True)

        self.sizes.add_aggregated(output_file.stat().st_size - size_before)

        if files_count > 1:
            self.log.info("%d files were successfully aggregated.", files_count)

        return output_file

    def delete_inputs_if_configured(self, resource_set: ResourceSet) -> List[Path]:
        deleted: List[Path] = []
        if not resource_set.aggregation.remove_included or not resource_set.files:
            return deleted

        for path in resource_set.files:
            if not path.exists():
                continue
            try:
                os.remove(path)
            except OSError as exc:
                self.log.warning("File %s could not be deleted after aggregation. (%s)", path.name, exc)
                continue
            deleted.append(path)
        return deleted

    def rename_to_final_output(self, working_file: Path | None, output_file: str | Path) -> Path | None:
        if working_file is None or not working_file.exists():
            return None
        output_file = Path(output_file)
        os.replace(working_file, output_file)
        self.log.debug("Moved %s to %s", working_file, output_file)
        return output_file

    def get_file_with_suffix(self, path: str | Path, suffix: str) -> Path:
        suffixed = path_with_suffix(path, suffix)
        suffixed.touch(exist_ok=True)
        return suffixed

    def _prepare_working_file(self, output_file: Path) -> Path:
        working_file = aggregated_path(output_file)
        working_file.parent.mkdir(parents=True, exist_ok=True)
        working_file.touch(exist_ok=True)
        return working_file

    def _get_encoder(self, encoding: str) -> codecs.IncrementalEncoder:
        try:
            return codecs.getincrementalencoder(encoding)()
        except LookupError as exc:
            raise UnsupportedEncodingError(f"Unsupported encoding: {encoding}") from exc

    def _read(self, path: Path, encoding: str) -> str:
        with open(path, "r", encoding=encoding, newline="") as handle:
            return handle.read()

    def _append(self, out: BinaryIO, encoder: codecs.IncrementalEncoder, text: str, *, final: bool = False) -> int:
        if not text and not final:
            return 0
        data = encoder.encode(text, final)
        if data:
            out.write(data)
        return len(data)
