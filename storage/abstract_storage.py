"""Storage abstraction layer for verification documents."""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import IO


class AbstractStorage(ABC):
    """Interface for document storage backends."""

    @abstractmethod
    def save(self, file_obj: IO[bytes], filename: str, folder: str | None = None) -> str:
        """Persist a file and return its key relative to the storage root."""

    @abstractmethod
    def delete(self, key: str) -> None:
        """Remove a stored file; missing keys are ignored."""
