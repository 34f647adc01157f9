"""Minimal XLIFF 1.2 writer."""

import re
import xml.etree.ElementTree as ET
from pathlib import Path
from typing import Iterable

from .languages import Locale

XLIFF_NS = "urn:oasis:names:tc:xliff:document:1.2"
XML_SPACE = "{http://www.w3.org/XML/1998/namespace}space"
TOOL_ID = "xliff-service"

# Not allowed in XML 1.0; vertical tab and form feed become line breaks
INVALID_XML_CHARS = re.compile(r"[\x00-\x08\x0b\x0c\x0e-\x1f\ufffe\uffff]")


def clean_text(text: str) -> str:
    return INVALID_XML_CHARS.sub(lambda m: "\n" if m.group() in "\x0b\x0c" else "", text)


def _q(tag: str) -> str:
    return f"{{{XLIFF_NS}}}{tag}"


def build_xliff(
    original: str,
    source: Locale,
    target: Locale,
    segments: Iterable[str],
    *,
    datatype: str = "plaintext",
) -> ET.ElementTree:
    root = ET.Element(_q("xliff"), {"version": "1.2"})
    file_el = ET.SubElement(
        root,
        _q("file"),
        {
            "original": original,
            "source-language": source.tag,
            "target-language": target.tag,
            "datatype": datatype,
        },
    )
    header = ET.SubElement(file_el, _q("header"))
    ET.SubElement(header, _q("tool"), {"tool-id": TOOL_ID, "tool-name": "XLIFF Service"})
    body = ET.SubElement(file_el, _q("body"))
    for i, text in enumerate(segments, start=1):
        unit = ET.SubElement(body, _q("trans-unit"), {"id": str(i), XML_SPACE: "preserve"})
        ET.SubElement(unit, _q("source")).text = clean_text(text)
        ET.SubElement(unit, _q("target"), {"state": "new"})
    ET.indent(root)
    return ET.ElementTree(root)


def write_xliff(
    output_path: Path,
    original: str,
    source: Locale,
    target: Locale,
    segments: Iterable[str],
    *,
    datatype: str = "plaintext",
) -> Path:
    tree = build_xliff(original, source, target, segments, datatype=datatype)
    with output_path.open("wb") as f:
        tree.write(f, encoding="utf-8", xml_declaration=True, default_namespace=XLIFF_NS)
    return output_path
