"""
Data models for localized resource tables.

Tables are immutable from the outside: every mutation returns a new table,
so a reconciliation pass can never change a caller's copy silently.
"""

from dataclasses import dataclass, field, replace
from typing import Dict, ItemsView, Iterator, KeysView, List, Optional

from .keys import LocalizedObjectType, decode


@dataclass(frozen=True)
class LocalizedValue:
    """A raw table value together with the kind its key encodes.

    For STRING the value is the literal text; for asset kinds it is an opaque
    asset reference resolved by an external loader.
    """

    kind: LocalizedObjectType
    value: str = ""

    @property
    def is_asset(self) -> bool:
        return self.kind.is_asset

    @classmethod
    def from_entry(cls, full_key: str, raw_value: str) -> "LocalizedValue":
        """Create a LocalizedValue from a full key and its raw value."""
        return cls(kind=decode(full_key)[1], value=raw_value)


@dataclass(frozen=True)
class ResourceTable:
    """Ordered mapping from full key to raw value for one language.

    ``language`` is ``None`` for the root table. ``header`` holds the opaque
    resource-file boilerplate and takes no part in equality.
    """

    language: Optional[str] = None
    entries: Dict[str, str] = field(default_factory=dict)
    header: Optional[str] = field(default=None, compare=False, repr=False)

    def __post_init__(self) -> None:
        # Own a private copy so callers cannot mutate us through their dict
        object.__setattr__(self, "entries", dict(self.entries))

    @property
    def is_root(self) -> bool:
        return self.language is None

    def keys(self) -> KeysView[str]:
        return self.entries.keys()

    def items(self) -> ItemsView[str, str]:
        return self.entries.items()

    def bare_keys(self) -> List[str]:
        """Return the bare keys in table order."""
        return [decode(key)[0] for key in self.entries]

    def get(self, full_key: str, default: Optional[str] = None) -> Optional[str]:
        return self.entries.get(full_key, default)

    def with_entry(self, full_key: str, value: str) -> "ResourceTable":
        """Return a copy with ``full_key`` set to ``value``."""
        entries = dict(self.entries)
        entries[full_key] = value
        return replace(self, entries=entries)

    def without_entry(self, full_key: str) -> "ResourceTable":
        """Return a copy without ``full_key`` (no-op if absent)."""
        entries = dict(self.entries)
        entries.pop(full_key, None)
        return replace(self, entries=entries)

    def with_language(self, language: Optional[str]) -> "ResourceTable":
        return replace(self, language=language)

    def empty_copy(self, language: Optional[str]) -> "ResourceTable":
        """Same keys, every value empty, bound to another language."""
        return ResourceTable(
            language=language,
            entries={key: "" for key in self.entries},
            header=self.header,
        )

    def parsed(self) -> Dict[str, LocalizedValue]:
        """Return bare key -> LocalizedValue, dropping the type tags."""
        parsed: Dict[str, LocalizedValue] = {}
        for full_key, raw_value in self.entries.items():
            bare_key, kind = decode(full_key)
            parsed[bare_key] = LocalizedValue(kind=kind, value=raw_value)
        return parsed

    def __len__(self) -> int:
        return len(self.entries)

    def __contains__(self, full_key: object) -> bool:
        return full_key in self.entries

    def __iter__(self) -> Iterator[str]:
        return iter(self.entries)
