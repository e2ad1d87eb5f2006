"""
Shared pytest fixtures for tile patcher tests
"""

import pytest
from PIL import Image


@pytest.fixture
def sample_4bpp_tile():
    """Create a sample 4bpp tile (32 bytes)"""
    # Diagonal pattern of color 1
    tile_data = bytearray(32)
    for y in range(8):
        tile_data[y * 2] = 1 << (7 - y)
    return bytes(tile_data)


@pytest.fixture
def sample_tile_table():
    """64 tiles where every byte of tile i is i"""
    data = bytearray()
    for i in range(64):
        data.extend(bytes([i]) * 32)
    return bytes(data)


@pytest.fixture
def source_bin(tmp_path, sample_tile_table):
    """Tile table file used as a copy source"""
    path = tmp_path / "src.bin"
    path.write_bytes(sample_tile_table)
    return path


@pytest.fixture
def dest_bin(tmp_path):
    """64-tile destination file of zero bytes"""
    path = tmp_path / "dst.bin"
    path.write_bytes(bytes(64 * 32))
    return path


@pytest.fixture
def gradient_raster():
    """128x32 grayscale raster; each tile holds a flat sample of tile_index * 4"""
    img = Image.new("L", (128, 32))
    pixels = []
    for y in range(32):
        for x in range(128):
            tile_idx = (y // 8) * 16 + (x // 8)
            pixels.append((tile_idx * 4) % 256)
    img.putdata(pixels)
    return img


@pytest.fixture
def source_pgm(tmp_path, gradient_raster):
    """Gradient raster saved as a PGM file"""
    path = tmp_path / "src.pgm"
    gradient_raster.save(path)
    return path


@pytest.fixture
def wide_pgm(tmp_path):
    """16-bit PGM (maxval 65535), one tile row; column x of every tile holds
    sample 32767, 65535, 8224 or 0 for x % 4 == 0, 1, 2, 3"""
    samples = [32767, 65535, 8224, 0]
    body = bytearray()
    for y in range(8):
        for x in range(128):
            body.extend(samples[x % 4].to_bytes(2, "big"))
    path = tmp_path / "wide.pgm"
    path.write_bytes(b"P5\n128 8\n65535\n" + bytes(body))
    return path


@pytest.fixture
def malformed_pgm(tmp_path):
    """PGM whose header declares a maxval of 0"""
    path = tmp_path / "bad.pgm"
    path.write_bytes(b"P5\n128 8\n0\n" + bytes(128 * 8))
    return path
