"""
External assets (audio, textures, prefabs) bound to non-string keys.
"""

from .relocator import (
    ASSET_FOLDERS,
    AssetRelocator,
    FileSystemAssetRelocator,
    RecordingAssetRelocator,
)

__all__ = [
    "ASSET_FOLDERS",
    "AssetRelocator",
    "FileSystemAssetRelocator",
    "RecordingAssetRelocator",
]
