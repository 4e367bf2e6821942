"""Document text extraction interface."""

from pathlib import Path
from typing import Protocol


class TextExtractor(Protocol):
    """Interface for pulling plain text out of a document."""

    def extract(self, path: Path | str) -> str:
        """Return the document's text, pages separated by blank lines."""
        ...
