from __future__ import annotations

import datetime as dt
import os
import tempfile
from abc import ABC, abstractmethod
from pathlib import Path

# Fixed English abbreviations; strftime("%b") follows the process locale.
MONTH_ABBREVIATIONS = (
    "Jan",
    "Feb",
    "Mar",
    "Apr",
    "May",
    "Jun",
    "Jul",
    "Aug",
    "Sep",
    "Oct",
    "Nov",
    "Dec",
)


def attachment_filename(today: dt.date | None = None) -> str:
    """Name a downloaded archive after the local date, e.g. attachment-5-Jun-2024.zip."""
    day = today or dt.date.today()
    month = MONTH_ABBREVIATIONS[day.month - 1]
    return f"attachment-{day.day}-{month}-{day.year}.zip"


class FileSaver(ABC):
    @abstractmethod
    def save(self, payload: bytes, filename: str) -> Path:
        raise NotImplementedError


class DirectoryFileSaver(FileSaver):
    def __init__(self, directory: str | Path = "downloads") -> None:
        self._directory = Path(directory)

    @property
    def directory(self) -> Path:
        return self._directory

    def save(self, payload: bytes, filename: str) -> Path:
        self._directory.mkdir(parents=True, exist_ok=True)
        target = self._directory / Path(filename).name

        fd, tmp_name = tempfile.mkstemp(
            prefix=f"{target.name}.",
            suffix=".part",
            dir=self._directory,
        )
        tmp_path = Path(tmp_name)

        try:
            with os.fdopen(fd, "wb") as handle:
                handle.write(payload)
            os.replace(tmp_path, target)
        finally:
            if tmp_path.exists():
                tmp_path.unlink()
        return target
