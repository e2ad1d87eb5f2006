#!/usr/bin/env python3
"""
Constants for the tile patcher
All magic numbers and script grammar pieces in one place
"""

# SNES 4bpp tile geometry
TILE_WIDTH = 8  # pixels
TILE_HEIGHT = 8  # pixels
BYTES_PER_TILE_4BPP = 32  # 4 bits per pixel, 8x8 pixels
PIXELS_PER_TILE = 64  # 8x8

# Tile encoding offsets
TILE_BITPLANE_OFFSET = 16  # Offset between bitplane pairs in 4bpp tiles

# Pixel masks
PIXEL_4BPP_MASK = 0x0F  # Mask for 4-bit pixel values

# Grayscale samples are quantized to 4 bits by integer division
QUANTIZE_DIVISOR = 16

# Tile sheet layout (both tile tables and rasters)
TILES_PER_ROW = 16
RASTER_WIDTH = TILES_PER_ROW * TILE_WIDTH  # 128 pixels

# Edit script grammar
VALID_EXTENTS = (1, 2, 4)
DEFAULT_EXTENT = 1
RAW_SUFFIX = ".bin"
RASTER_SUFFIX = ".pgm"
DESTINATION_HEADER_SUFFIX = ".bin:"
