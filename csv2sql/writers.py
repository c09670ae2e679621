import csv
from typing import Sequence, TextIO


class OutputWriter:
    """Row sink for query results."""

    def __init__(self, stream: TextIO):
        self.stream = stream

    def write(self, row: Sequence[str]) -> None:
        raise NotImplementedError

    def flush(self) -> None:
        self.stream.flush()


class CSVWriter(OutputWriter):
    """Standard CSV: fields quoted only when they need it."""

    def __init__(self, stream: TextIO):
        super().__init__(stream)
        self._writer = csv.writer(stream, lineterminator="\n")

    def write(self, row: Sequence[str]) -> None:
        self._writer.writerow(row)


class PlainTextWriter(OutputWriter):
    """Tab-joined fields, one line per row, no escaping."""

    def write(self, row: Sequence[str]) -> None:
        self.stream.write("\t".join(row) + "\n")


def get_writer(stream: TextIO, plain_text: bool = False) -> OutputWriter:
    if plain_text:
        return PlainTextWriter(stream)
    return CSVWriter(stream)
