"""
Relocation of the external assets behind non-string keys.

Assets are stored per language and per kind::

    <base>/<language>/Audio Files/<bare key>.<ext>
    <base>/<language>/Textures/<bare key>.<ext>
    <base>/<language>/Prefabs/<bare key>.<ext>

Tables only keep an opaque reference to the asset, never the path.
"""

import logging
import os
import shutil
import uuid
from dataclasses import dataclass, field
from pathlib import Path
from typing import Dict, List, Optional, Protocol, Tuple

from PIL import Image

from ..tables.keys import LocalizedObjectType

ASSET_FOLDERS: Dict[LocalizedObjectType, str] = {
    LocalizedObjectType.AUDIO: "Audio Files",
    LocalizedObjectType.TEXTURE: "Textures",
    LocalizedObjectType.GAME_OBJECT: "Prefabs",
}

META_SUFFIX = ".meta"


class AssetRelocator(Protocol):
    """Operations the reconciliation engine needs on external assets."""

    def copy_into(
        self, kind: LocalizedObjectType, bare_key: str, language: str, source: str | Path
    ) -> str: ...

    def delete(self, kind: LocalizedObjectType, bare_key: str, language: str) -> None: ...

    def rename(
        self,
        kind: LocalizedObjectType,
        old_bare_key: str,
        new_bare_key: str,
        language: str,
    ) -> None: ...


def _asset_folder(kind: LocalizedObjectType) -> str:
    try:
        return ASSET_FOLDERS[kind]
    except KeyError:
        raise ValueError(f"Keys of type {kind.name} have no asset") from None


class FileSystemAssetRelocator:
    """AssetRelocator working directly on the localization directory."""

    def __init__(self, base_dir: str | Path):
        self.base_dir = Path(base_dir)
        self.logger = logging.getLogger(f"{__name__}.{self.__class__.__name__}")

    def folder(self, kind: LocalizedObjectType, language: str) -> Path:
        """Directory holding assets of ``kind`` for ``language``."""
        return self.base_dir / language / _asset_folder(kind)

    def find_asset(
        self, kind: LocalizedObjectType, bare_key: str, language: str
    ) -> Optional[Path]:
        """Locate the asset file named after ``bare_key``, whatever its extension."""
        folder = self.folder(kind, language)
        if not folder.is_dir():
            return None
        for path in sorted(folder.iterdir()):
            if path.suffix == META_SUFFIX or not path.is_file():
                continue
            if path.stem == bare_key:
                return path
        return None

    def reference_for(self, path: Path) -> str:
        """Opaque, stable handle of an asset path."""
        relative = path.relative_to(self.base_dir).as_posix()
        return str(uuid.uuid5(uuid.NAMESPACE_URL, relative))

    def copy_into(
        self, kind: LocalizedObjectType, bare_key: str, language: str, source: str | Path
    ) -> str:
        """Copy ``source`` into the language's asset folder, named after the key.

        Any previous asset for the key is replaced. Textures must be
        decodable images.

        Returns:
            The reference to store as the table value.
        """
        source_path = Path(source)
        if not source_path.is_file():
            raise FileNotFoundError(f"Asset source not found: {source_path}")
        if kind == LocalizedObjectType.TEXTURE:
            self._verify_texture(source_path)

        self.delete(kind, bare_key, language)
        folder = self.folder(kind, language)
        folder.mkdir(parents=True, exist_ok=True)
        target = folder / f"{bare_key}{source_path.suffix}"
        shutil.copyfile(source_path, target)

        self.logger.debug(f"Copied {source_path} to {target}")
        return self.reference_for(target)

    def delete(self, kind: LocalizedObjectType, bare_key: str, language: str) -> None:
        """Delete the asset of a key (no-op if there is none)."""
        path = self.find_asset(kind, bare_key, language)
        if path is None:
            return
        path.unlink()
        meta = path.with_name(path.name + META_SUFFIX)
        if meta.is_file():
            meta.unlink()
        self.logger.debug(f"Deleted asset {path}")

    def rename(
        self,
        kind: LocalizedObjectType,
        old_bare_key: str,
        new_bare_key: str,
        language: str,
    ) -> None:
        """Rename the asset of a key in place, keeping its extension."""
        path = self.find_asset(kind, old_bare_key, language)
        if path is None or old_bare_key == new_bare_key:
            return

        target = path.with_name(f"{new_bare_key}{path.suffix}")
        if target.exists():
            self.logger.warning(f"Replacing existing asset {target} while renaming {path}")
        os.replace(path, target)

        meta = path.with_name(path.name + META_SUFFIX)
        if meta.is_file():
            os.replace(meta, target.with_name(target.name + META_SUFFIX))
        self.logger.debug(f"Renamed asset {path} to {target}")

    @staticmethod
    def _verify_texture(path: Path) -> None:
        try:
            with Image.open(path) as image:
                image.verify()
        except (OSError, SyntaxError, ValueError) as e:
            raise ValueError(f"Texture asset {path} is not a readable image: {e}") from e


@dataclass
class RecordingAssetRelocator:
    """AssetRelocator that only records the operations it is asked to do."""

    calls: List[Tuple[str, ...]] = field(default_factory=list)

    def copy_into(
        self, kind: LocalizedObjectType, bare_key: str, language: str, source: str | Path
    ) -> str:
        _asset_folder(kind)
        self.calls.append(("copy_into", kind.name, bare_key, language, str(source)))
        return f"{language}/{kind.name}/{bare_key}"

    def delete(self, kind: LocalizedObjectType, bare_key: str, language: str) -> None:
        _asset_folder(kind)
        self.calls.append(("delete", kind.name, bare_key, language))

    def rename(
        self,
        kind: LocalizedObjectType,
        old_bare_key: str,
        new_bare_key: str,
        language: str,
    ) -> None:
        _asset_folder(kind)
        self.calls.append(("rename", kind.name, old_bare_key, new_bare_key, language))
