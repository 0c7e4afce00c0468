"""
Reading and writing ``.resx`` resource tables.

Only ``data`` records are interpreted. Everything between the ``<root>`` tag
and the first record (the xsd schema and the resheaders) is kept verbatim as
the table header and written back unchanged.
"""

import logging
import os
import re
import tempfile
import xml.etree.ElementTree as ET
from pathlib import Path
from typing import Callable, Dict, List, Optional
from xml.sax.saxutils import escape

from ..errors import LocalizationError, ResourceParseError
from ..resources import get_empty_resource_header
from .models import ResourceTable

logger = logging.getLogger(__name__)

SCHEMA_END_MARKER = "</xsd:schema>"
XML_DECLARATION = '<?xml version="1.0" encoding="utf-8"?>'

_ROOT_OPEN = re.compile(r"<root\b[^>]*>")
_ROOT_CLOSE = "</root>"
_DATA_OPEN = re.compile(r"<data\b")
_DATA_RECORD = re.compile(r"<data\b[^>]*?/>|<data\b.*?</data>", re.DOTALL)

# Characters the XML parser would normalise away unless written as references
_TEXT_ENTITIES = {"\r": "&#13;"}
_ATTR_ENTITIES = {'"': "&quot;", "\n": "&#10;", "\r": "&#13;", "\t": "&#9;"}

IssueHandler = Callable[[LocalizationError], None]


def _report(
    on_issue: Optional[IssueHandler], message: str, language: Optional[str], key: Optional[str] = None
) -> None:
    logger.warning(message)
    if on_issue:
        on_issue(ResourceParseError(message, language=language, key=key))


def parse_table(
    text: str,
    language: Optional[str] = None,
    on_issue: Optional[IssueHandler] = None,
) -> ResourceTable:
    """Parse the text of a resource file into a ResourceTable.

    Malformed records are skipped with a warning. When the record section is
    not well-formed XML as a whole, records are salvaged one by one.

    Raises:
        ResourceParseError: the document has no ``<root>`` element.
    """
    root_match = _ROOT_OPEN.search(text)
    close_index = text.rfind(_ROOT_CLOSE)
    if root_match is None or close_index < root_match.end():
        raise ResourceParseError(
            "Resource file has no <root> element", language=language
        )

    marker_index = text.find(SCHEMA_END_MARKER, root_match.end())
    body_start = (
        marker_index + len(SCHEMA_END_MARKER)
        if marker_index >= 0
        else root_match.end()
    )
    first_data = _DATA_OPEN.search(text, body_start, close_index)
    header_end = first_data.start() if first_data else close_index
    header = text[root_match.end():header_end].rstrip() or None

    body = root_match.group(0) + text[body_start:close_index] + _ROOT_CLOSE
    try:
        records = [
            element
            for element in ET.fromstring(body)
            if element.tag == "data"
        ]
    except ET.ParseError as e:
        _report(
            on_issue,
            f"Resource file for language '{language or 'root'}' is not well-formed ({e}), "
            "salvaging individual records",
            language,
        )
        records = _salvage_records(text[body_start:close_index], language, on_issue)

    entries: Dict[str, str] = {}
    for record in records:
        key = record.get("name")
        if not key:
            _report(on_issue, "Skipping data record without a name", language)
            continue
        if key in entries:
            _report(
                on_issue,
                f"Skipping duplicate data record '{key}' in language '{language or 'root'}'",
                language,
                key,
            )
            continue
        value_element = record.find("value")
        entries[key] = (
            value_element.text or "" if value_element is not None else ""
        )

    return ResourceTable(language=language, entries=entries, header=header)


def _salvage_records(
    body: str, language: Optional[str], on_issue: Optional[IssueHandler]
) -> List[ET.Element]:
    """Parse each ``data`` record on its own, dropping the broken ones."""
    records: List[ET.Element] = []
    for match in _DATA_RECORD.finditer(body):
        try:
            records.append(ET.fromstring(match.group(0)))
        except ET.ParseError as e:
            _report(
                on_issue,
                f"Skipping malformed data record at offset {match.start()}: {e}",
                language,
            )
    return records


def load_table(
    path: str | Path,
    language: Optional[str] = None,
    on_issue: Optional[IssueHandler] = None,
) -> ResourceTable:
    """Load a resource table from disk.

    Raises:
        FileNotFoundError: the file does not exist.
        ResourceParseError: the file cannot be decoded or has no root.
    """
    file_path = Path(path)
    try:
        text = file_path.read_text(encoding="utf-8-sig")
    except UnicodeDecodeError as e:
        raise ResourceParseError(
            f"Resource file {file_path} is not valid UTF-8: {e}", language=language
        ) from e

    table = parse_table(text, language=language, on_issue=on_issue)
    logger.debug(f"Loaded {len(table)} entries from {file_path}")
    return table


def dump_table(table: ResourceTable) -> str:
    """Serialize a table. Output depends only on the table contents."""
    header = table.header if table.header is not None else get_empty_resource_header()
    parts = [XML_DECLARATION, "\n<root>", header, "\n"]
    for key, value in table.items():
        parts.append(
            f'\t<data name="{escape(key, _ATTR_ENTITIES)}" xml:space="preserve">\n'
            f"\t\t<value>{escape(value, _TEXT_ENTITIES)}</value>\n"
            "\t</data>\n"
        )
    parts.append("</root>\n")
    return "".join(parts)


def save_table(table: ResourceTable, path: str | Path) -> None:
    """Write a table to ``path`` through a temporary file and an atomic replace."""
    file_path = Path(path)
    file_path.parent.mkdir(parents=True, exist_ok=True)
    content = dump_table(table)

    fd, temp_name = tempfile.mkstemp(
        prefix=f".{file_path.name}.", suffix=".tmp", dir=file_path.parent
    )
    try:
        with os.fdopen(fd, "w", encoding="utf-8", newline="") as f:
            f.write(content)
        os.replace(temp_name, file_path)
    except BaseException:
        Path(temp_name).unlink(missing_ok=True)
        raise

    logger.debug(f"Saved {len(table)} entries to {file_path}")
