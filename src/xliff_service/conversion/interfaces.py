from pathlib import Path
from typing import BinaryIO, Protocol

from .languages import Locale
from .project import Project


class ConversionEngine(Protocol):
    def generate(self, source: Locale, target: Locale, input_file: Path) -> Path:
        """Convert ``input_file`` into an XLIFF file and return its path.

        Raises UnsupportedFormatError when the input cannot be converted.
        This is a blocking call; callers should offload to threads if needed.
        """


class ProjectGateway(Protocol):
    def open(self, filename: str | None, stream: BinaryIO) -> Project:
        ...
