#!/usr/bin/env python3
"""
SNES 4bpp tile encoding/decoding utilities

A tile is 8x8 pixels at 4 bits per pixel, stored as 32 bytes in planar
form: bitplanes 0 and 1 interleaved per row in the first 16 bytes,
bitplanes 2 and 3 interleaved per row in the last 16. Column 0 is the
most significant bit of each plane byte.
"""

import os
from dataclasses import dataclass
from typing import List

from PIL import Image

from .constants import (
    BYTES_PER_TILE_4BPP,
    PIXEL_4BPP_MASK,
    PIXELS_PER_TILE,
    QUANTIZE_DIVISOR,
    RASTER_WIDTH,
    TILE_BITPLANE_OFFSET,
    TILE_HEIGHT,
    TILE_WIDTH,
    TILES_PER_ROW,
)
from .exceptions import ImagePreconditionError, TileIOError
from .logging_config import get_logger

logger = get_logger(__name__)

# Pillow modes for grayscale samples wider than 8 bits
WIDE_GRAYSCALE_MODES = ("I", "I;16", "I;16B", "I;16L")


def decode_4bpp_tile(data: bytes, offset: int = 0) -> List[int]:
    """
    Decode a single 8x8 4bpp SNES tile.

    Args:
        data: Raw tile data bytes
        offset: Starting offset in the data

    Returns:
        List of 64 pixel values (0-15), row-major

    Raises:
        IndexError: If offset + BYTES_PER_TILE_4BPP exceeds data length
    """
    if offset < 0 or offset + BYTES_PER_TILE_4BPP > len(data):
        raise IndexError(f"Tile data out of bounds at offset {offset}")

    tile = []
    for y in range(TILE_HEIGHT):
        bp0 = data[offset + y * 2]
        bp1 = data[offset + y * 2 + 1]
        bp2 = data[offset + TILE_BITPLANE_OFFSET + y * 2]
        bp3 = data[offset + TILE_BITPLANE_OFFSET + y * 2 + 1]

        for x in range(TILE_WIDTH):
            bit = 7 - x
            pixel = ((bp0 >> bit) & 1) | \
                   (((bp1 >> bit) & 1) << 1) | \
                   (((bp2 >> bit) & 1) << 2) | \
                   (((bp3 >> bit) & 1) << 3)
            tile.append(pixel)

    return tile


def encode_4bpp_tile(tile_pixels: List[int]) -> bytes:
    """
    Encode an 8x8 tile to SNES 4bpp format.

    Args:
        tile_pixels: List of 64 pixel values (0-15), row-major

    Returns:
        32 bytes of encoded tile data

    Raises:
        ValueError: If tile_pixels doesn't contain exactly 64 values
    """
    if len(tile_pixels) != PIXELS_PER_TILE:
        raise ValueError(f"Expected {PIXELS_PER_TILE} pixels, got {len(tile_pixels)}")

    output = bytearray(BYTES_PER_TILE_4BPP)

    for y in range(TILE_HEIGHT):
        bp0 = 0
        bp1 = 0
        bp2 = 0
        bp3 = 0

        for x in range(TILE_WIDTH):
            pixel = tile_pixels[y * TILE_WIDTH + x] & PIXEL_4BPP_MASK
            bp0 |= (pixel & 1) << (7 - x)
            bp1 |= ((pixel >> 1) & 1) << (7 - x)
            bp2 |= ((pixel >> 2) & 1) << (7 - x)
            bp3 |= ((pixel >> 3) & 1) << (7 - x)

        output[y * 2] = bp0
        output[y * 2 + 1] = bp1
        output[TILE_BITPLANE_OFFSET + y * 2] = bp2
        output[TILE_BITPLANE_OFFSET + y * 2 + 1] = bp3

    return bytes(output)


def tile_offset(idx: int) -> int:
    """Byte offset of tile record ``idx`` inside a tile table file."""
    if idx < 0:
        raise ValueError(f"Tile index cannot be negative: {idx}")
    return idx * BYTES_PER_TILE_4BPP


def load_raster(path) -> Image.Image:
    """
    Open an image file and convert it to 8-bit grayscale.

    16-bit rasters (PGM with a maxval above 255) open in an integer mode and
    are scaled down to 0-255, rounding to nearest, rather than clipped.

    Raises:
        TileIOError: If the file cannot be opened or decoded
    """
    try:
        with Image.open(path) as img:
            if img.mode in WIDE_GRAYSCALE_MODES:
                return img.convert("I").point(lambda v: v * (1 / 257) + 0.5).convert("L")
            return img.convert("L")
    except (OSError, ValueError, SyntaxError, Image.DecompressionBombError) as e:
        raise TileIOError(f"Could not read raster {path}: {e}") from e


@dataclass(frozen=True)
class Tile:
    """One 8x8 4bpp tile as its 32 packed bytes"""

    data: bytes

    def __post_init__(self):
        if len(self.data) != BYTES_PER_TILE_4BPP:
            raise ValueError(
                f"Tile must be {BYTES_PER_TILE_4BPP} bytes, got {len(self.data)}")
        object.__setattr__(self, "data", bytes(self.data))

    def __bytes__(self) -> bytes:
        return self.data

    @classmethod
    def from_pixels(cls, pixels: List[int]) -> "Tile":
        """Build a tile from 64 row-major 4-bit pixel values."""
        return cls(encode_4bpp_tile(pixels))

    def pixels(self) -> List[int]:
        """Decode to 64 row-major pixel values (0-15)."""
        return decode_4bpp_tile(self.data)

    @classmethod
    def load_from_file(cls, path, idx: int) -> "Tile":
        """
        Read tile record ``idx`` from a tile table file.

        Args:
            path: Tile table file
            idx: Tile index; the record starts at byte ``idx * 32``

        Returns:
            The tile stored at that index

        Raises:
            TileIOError: If the file cannot be read or is too short
        """
        offset = tile_offset(idx)
        try:
            with open(path, "rb") as f:
                f.seek(offset)
                data = f.read(BYTES_PER_TILE_4BPP)
        except OSError as e:
            raise TileIOError(f"Could not read tile 0x{idx:X} from {path}: {e}") from e

        if len(data) != BYTES_PER_TILE_4BPP:
            raise TileIOError(
                f"Unexpected end of file reading tile 0x{idx:X} from {path} "
                f"(offset 0x{offset:X}, got {len(data)} of {BYTES_PER_TILE_4BPP} bytes)")

        logger.debug(f"Read tile 0x{idx:X} from {path} at offset 0x{offset:X}")
        return cls(data)

    def write_to_file(self, path, idx: int) -> None:
        """
        Overwrite tile record ``idx`` of an existing tile table file in place.

        The file is never created, truncated or extended; only the 32 bytes
        of the record are touched.

        Raises:
            TileIOError: If the file is missing, too short, or not writable
        """
        offset = tile_offset(idx)
        try:
            with open(path, "r+b") as f:
                file_size = os.fstat(f.fileno()).st_size
                if offset + BYTES_PER_TILE_4BPP > file_size:
                    raise TileIOError(
                        f"Cannot write tile 0x{idx:X} to {path}: offset 0x{offset:X} "
                        f"exceeds file size (0x{file_size:X})")
                f.seek(offset)
                f.write(self.data)
        except OSError as e:
            raise TileIOError(f"Could not write tile 0x{idx:X} to {path}: {e}") from e

        logger.debug(f"Wrote tile 0x{idx:X} to {path} at offset 0x{offset:X}")

    @classmethod
    def from_image_at(cls, image: Image.Image, idx: int) -> "Tile":
        """
        Encode the tile at linear index ``idx`` of a 128 pixel wide raster.

        Grayscale samples are quantized to 4 bits by integer division by 16.

        Args:
            image: Grayscale raster, 16 tiles per row
            idx: Tile index; row ``idx // 16``, column ``idx % 16``

        Raises:
            ImagePreconditionError: If the raster is not 128 pixels wide or
                the tile lies outside it
        """
        width, height = image.size
        if width != RASTER_WIDTH:
            raise ImagePreconditionError(
                f"Raster must be {RASTER_WIDTH} pixels wide, got {width}")
        if idx < 0:
            raise ImagePreconditionError(f"Tile index cannot be negative: {idx}")

        tile_row = idx // TILES_PER_ROW
        tile_col = idx % TILES_PER_ROW
        if (tile_row + 1) * TILE_HEIGHT > height:
            raise ImagePreconditionError(
                f"Tile 0x{idx:X} (row {tile_row}) lies outside a raster "
                f"{height} pixels high")

        if image.mode != "L":
            image = image.convert("L")

        pixels = []
        for row_offset in range(TILE_HEIGHT):
            for col_offset in range(TILE_WIDTH):
                sample = image.getpixel((tile_col * TILE_WIDTH + col_offset,
                                         tile_row * TILE_HEIGHT + row_offset))
                pixels.append(sample // QUANTIZE_DIVISOR)

        return cls.from_pixels(pixels)

    def to_image(self) -> Image.Image:
        """
        Decode to an 8x8 grayscale image.

        Samples hold the raw 4-bit values (0-15); they are not rescaled to
        the 0-255 range, so this does not invert ``from_image_at``.
        """
        img = Image.new("L", (TILE_WIDTH, TILE_HEIGHT))
        img.putdata(self.pixels())
        return img
