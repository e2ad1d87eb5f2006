"""
Tile Patcher
Copies SNES 4bpp tiles into existing tile tables from other tile tables
or grayscale rasters, driven by a small edit script
"""

from .edit_script import EditDirective, EditScript, SourceKind
from .exceptions import (
    ImagePreconditionError,
    ScriptParseError,
    TileIOError,
    TilePatcherError,
    UnsupportedSourceError,
)
from .tile_utils import Tile, decode_4bpp_tile, encode_4bpp_tile

__version__ = "1.0.0"
__all__ = [
    "EditDirective",
    "EditScript",
    "ImagePreconditionError",
    "ScriptParseError",
    "SourceKind",
    "Tile",
    "TileIOError",
    "TilePatcherError",
    "UnsupportedSourceError",
    "decode_4bpp_tile",
    "encode_4bpp_tile",
]
