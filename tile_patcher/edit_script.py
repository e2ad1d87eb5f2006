#!/usr/bin/env python3
"""
Tile edit scripts

A script names a destination tile table on an unindented line and lists
indented copy directives beneath it:

    Graphics/GFX05.bin:
      0C Graphics/GFX02.bin:0E:2
      20 Graphics/title.pgm:3

Each directive copies a square block of ``size`` x ``size`` tiles (size 1, 2
or 4; default 1) from a raw tile table (.bin) or a 128 pixel wide grayscale
raster (.pgm) into the destination, addressed by hex tile index. Blocks walk
tile sheets with a row stride of 16 tiles.
"""

import enum
import re
from dataclasses import dataclass
from pathlib import Path
from typing import Iterable, Iterator, List, Optional, Tuple

from .constants import (
    DEFAULT_EXTENT,
    DESTINATION_HEADER_SUFFIX,
    RASTER_SUFFIX,
    RAW_SUFFIX,
    TILES_PER_ROW,
    VALID_EXTENTS,
)
from .exceptions import ScriptParseError, TileIOError, UnsupportedSourceError
from .logging_config import get_logger
from .tile_utils import Tile, load_raster

logger = get_logger(__name__)

DIRECTIVE_PATTERN = re.compile(
    r"^([0-9a-fA-F]{1,4}) (.*\.(?:pgm|bin)):([0-9a-fA-F]{1,4})(?::([124]))?$"
)


class SourceKind(enum.Enum):
    """Where a directive's tiles come from"""

    RAW = "raw"
    RASTER = "raster"

    @classmethod
    def from_path(cls, path) -> "SourceKind":
        """
        Pick the source kind from a file suffix.

        Raises:
            UnsupportedSourceError: For anything but .bin or .pgm
        """
        suffix = Path(path).suffix.lower()
        if suffix == RAW_SUFFIX:
            return cls.RAW
        if suffix == RASTER_SUFFIX:
            return cls.RASTER
        raise UnsupportedSourceError(f"Unsupported tile source: {path}")


@dataclass(frozen=True)
class EditDirective:
    """Copy a size x size block of tiles from a source into a destination"""

    source: Path
    source_index: int
    source_kind: SourceKind
    destination: Path
    destination_index: int
    size: int = DEFAULT_EXTENT
    line_number: Optional[int] = None

    def __post_init__(self):
        if self.size not in VALID_EXTENTS:
            raise ValueError(f"Block size must be one of {VALID_EXTENTS}, got {self.size}")
        if self.source_index < 0 or self.destination_index < 0:
            raise ValueError("Tile indices cannot be negative")

    def offsets(self) -> List[int]:
        """Tile offsets covered by the block, column by column."""
        return [TILES_PER_ROW * x + y
                for x in range(self.size)
                for y in range(self.size)]

    def copies(self) -> List[Tuple[int, int]]:
        """(source index, destination index) pairs in application order."""
        return [(self.source_index + offset, self.destination_index + offset)
                for offset in self.offsets()]

    def apply(self) -> int:
        """
        Copy every tile of the block, in order.

        Returns:
            Number of tiles written

        Raises:
            TilePatcherError: On the first failed read or write; tiles
                already written stay written
        """
        if self.source_kind is SourceKind.RASTER:
            raster = load_raster(self.source)

            def read(idx):
                return Tile.from_image_at(raster, idx)
        else:
            def read(idx):
                return Tile.load_from_file(self.source, idx)

        copies = self.copies()
        for src_idx, dst_idx in copies:
            tile = read(src_idx)
            tile.write_to_file(self.destination, dst_idx)

        logger.info(f"{self.describe()}: wrote {len(copies)} tile(s)")
        return len(copies)

    def describe(self) -> str:
        return (f"{self.source}:0x{self.source_index:X} -> "
                f"{self.destination}:0x{self.destination_index:X} "
                f"({self.size}x{self.size})")


def parse_directive(line: str, destination: Optional[Path],
                    line_number: Optional[int] = None) -> EditDirective:
    """
    Parse one indented directive line.

    Args:
        line: Directive text, leading whitespace already removed
        destination: Destination tile table declared above the line
        line_number: 1-based line number for error messages

    Raises:
        ScriptParseError: If the line does not match the directive grammar
            or no destination has been declared yet
    """
    if destination is None:
        raise ScriptParseError("directive before any destination file",
                               line_number, line)

    match = DIRECTIVE_PATTERN.match(line)
    if not match:
        raise ScriptParseError("malformed directive", line_number, line)

    dst_idx, source, src_idx, extent = match.groups()
    return EditDirective(
        source=Path(source),
        source_index=int(src_idx, 16),
        source_kind=SourceKind.from_path(source),
        destination=destination,
        destination_index=int(dst_idx, 16),
        size=int(extent) if extent else DEFAULT_EXTENT,
        line_number=line_number,
    )


def parse_destination(line: str, line_number: Optional[int] = None) -> Path:
    """Parse an unindented ``<path>.bin:`` destination line."""
    if not line.endswith(DESTINATION_HEADER_SUFFIX):
        raise ScriptParseError(
            f"expected a destination line ending in '{DESTINATION_HEADER_SUFFIX}'",
            line_number, line)
    return Path(line[:-1])


class EditScript:
    """Ordered, immutable list of edit directives"""

    def __init__(self, directives: Iterable[EditDirective] = ()):
        self._directives = tuple(directives)

    @property
    def directives(self) -> Tuple[EditDirective, ...]:
        return self._directives

    def __len__(self) -> int:
        return len(self._directives)

    def __iter__(self) -> Iterator[EditDirective]:
        return iter(self._directives)

    def __repr__(self) -> str:
        return f"EditScript({len(self)} directives)"

    @classmethod
    def parse(cls, lines: Iterable[str]) -> "EditScript":
        """
        Parse script lines.

        The current destination is carried from each unindented
        declaration to the directives below it.

        Raises:
            ScriptParseError: On the first line that breaks the grammar
        """
        destination = None
        directives = []
        for line_number, raw_line in enumerate(lines, start=1):
            line = raw_line.rstrip("\r\n")
            if not line.strip():
                continue

            if line.startswith(" "):
                directives.append(
                    parse_directive(line.lstrip(), destination, line_number))
            else:
                destination = parse_destination(line, line_number)

        logger.debug(f"Parsed {len(directives)} directive(s)")
        return cls(directives)

    @classmethod
    def load(cls, path) -> "EditScript":
        """
        Read and parse a script file.

        Raises:
            TileIOError: If the file cannot be read
            ScriptParseError: If the script is malformed
        """
        try:
            with open(path, encoding="utf-8") as f:
                lines = f.readlines()
        except (OSError, UnicodeDecodeError) as e:
            raise TileIOError(f"Could not read edit script {path}: {e}") from e

        logger.info(f"Loading edit script: {path}")
        return cls.parse(lines)

    def apply(self) -> int:
        """Apply every directive in script order; returns tiles written."""
        total = 0
        for directive in self._directives:
            total += directive.apply()
        logger.info(f"Applied {len(self)} directive(s), {total} tile(s) written")
        return total
