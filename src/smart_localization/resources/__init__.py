"""
Resources for smart_localization.

Provides helpers to access packaged files such as the empty resource header
written into new ``.resx`` tables.
"""

from functools import lru_cache
from importlib import resources as importlib_resources


@lru_cache(maxsize=1)
def get_empty_resource_header() -> str:
    """Return the packaged resx boilerplate (schema and resheaders).

    The text is inserted verbatim after the ``<root>`` tag of every table
    that does not carry a header of its own.
    """
    header_file = importlib_resources.files(__name__).joinpath(
        "empty_resource_header.xml"
    )
    return header_file.read_text(encoding="utf-8").rstrip()
