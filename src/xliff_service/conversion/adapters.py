import logging
from pathlib import Path
from typing import Iterator

from .errors import UnsupportedFormatError
from .interfaces import ConversionEngine
from .languages import Locale
from .xliff import write_xliff

logger = logging.getLogger(__name__)


def supported_extensions() -> set[str]:
    from docling.datamodel.base_models import FormatToExtensions

    return {ext.lower() for exts in FormatToExtensions.values() for ext in exts}


def iter_segments(doc: object) -> Iterator[str]:
    """Yield translatable text of a Docling document in reading order."""
    for item, _level in doc.iterate_items():  # type: ignore[attr-defined]
        data = getattr(item, "data", None)
        cells = getattr(data, "table_cells", None)
        if cells is not None:
            for cell in cells:
                text = (cell.text or "").strip()
                if text:
                    yield text
            continue
        text = (getattr(item, "text", None) or "").strip()
        if text:
            yield text


class DoclingXliffEngine(ConversionEngine):
    """Extracts text with Docling and writes it as XLIFF 1.2.

    The artifact is written next to the input as ``<input name>.xlf`` so that
    it lives and dies with the request's project directory.
    """

    def extract_segments(self, input_file: Path) -> list[str]:
        from docling.document_converter import DocumentConverter
        from docling.exceptions import ConversionError as DoclingConversionError

        try:
            result = DocumentConverter().convert(str(input_file))
        except DoclingConversionError as e:
            raise UnsupportedFormatError(f"The file '{input_file.name}' could not be converted: {e}") from e
        return list(iter_segments(result.document))

    def generate(self, source: Locale, target: Locale, input_file: Path) -> Path:
        ext = input_file.suffix.lower().lstrip(".")
        if not ext or ext not in supported_extensions():
            raise UnsupportedFormatError(f"The format '{ext or input_file.name}' is not supported")

        segments = self.extract_segments(input_file)
        if not segments:
            raise UnsupportedFormatError(f"The file '{input_file.name}' has no translatable content")
        logger.debug("Extracted %d segments from %s", len(segments), input_file.name)

        output_path = input_file.with_name(f"{input_file.name}.xlf")
        return write_xliff(
            output_path,
            original=input_file.name,
            source=source,
            target=target,
            segments=segments,
            datatype=f"x-{ext}",
        )
