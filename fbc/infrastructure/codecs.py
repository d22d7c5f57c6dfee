"""Streaming encoders for the supported container formats.

Nothing here implements compression; each format tag maps onto an existing
streaming encoder (brotli, gzip, zlib) that wraps an open destination file.
"""

import gzip
import logging
import shutil
import zlib
from pathlib import Path
from typing import BinaryIO, Callable, Dict, Optional
import brotli
from fbc.domain.models import CompressionLevel

CHUNK_SIZE = 1024 * 1024

BROTLI = "br"
GZIP = "gz"
ZLIB = "zlib"
DEFLATE = "deflate"

# Format tag (lowercased) -> codec name
FORMAT_ALIASES: Dict[str, str] = {
    "br": BROTLI,
    "gz": GZIP,
    "zlib": ZLIB,
    "def": DEFLATE,
    "deflate": DEFLATE,
}

# zlib-family level, brotli quality
LEVEL_MAP: Dict[CompressionLevel, tuple] = {
    CompressionLevel.OPTIMAL: (6, 4),
    CompressionLevel.FASTEST: (1, 1),
    CompressionLevel.NO_COMPRESSION: (0, 0),
    CompressionLevel.SMALLEST_SIZE: (9, 11),
}


def codec_for(format_tag: str) -> Optional[str]:
    return FORMAT_ALIASES.get(format_tag.strip().lower())


class EncodeStream:
    """Write-side wrapper feeding an incremental compressor into a destination."""

    def __init__(self, destination: BinaryIO, compress: Callable[[bytes], bytes], finish: Callable[[], bytes]):
        self._destination = destination
        self._compress = compress
        self._finish = finish
        self.closed = False

    def write(self, data: bytes) -> int:
        if self.closed:
            raise ValueError("write to closed encode stream")
        chunk = self._compress(bytes(data))
        if chunk:
            self._destination.write(chunk)
        return len(data)

    def close(self):
        if self.closed:
            return
        self.closed = True
        tail = self._finish()
        if tail:
            self._destination.write(tail)

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        self.close()
        return False


class CodecAdapter:
    """Opens encode streams by format tag and copies files through them."""

    def __init__(self, chunk_size: int = CHUNK_SIZE):
        self.chunk_size = chunk_size
        self.logger = logging.getLogger(__name__)

    def supports(self, format_tag: str) -> bool:
        return codec_for(format_tag) is not None

    def open_stream(self, format_tag: str, destination: BinaryIO, level: CompressionLevel):
        """Returns a writable encode stream over destination, or None for an unknown tag.

        Closing the returned stream finishes the container but leaves destination open.
        """
        codec = codec_for(format_tag)
        zlib_level, brotli_quality = LEVEL_MAP[CompressionLevel(level)]

        if codec == BROTLI:
            compressor = brotli.Compressor(quality=brotli_quality)
            return EncodeStream(destination, compressor.process, compressor.finish)
        if codec == GZIP:
            # mtime=0 and an empty name keep the header byte-identical across runs
            return gzip.GzipFile(filename="", mode="wb", compresslevel=zlib_level, fileobj=destination, mtime=0)
        if codec == ZLIB:
            compressor = zlib.compressobj(zlib_level, zlib.DEFLATED, zlib.MAX_WBITS)
            return EncodeStream(destination, compressor.compress, compressor.flush)
        if codec == DEFLATE:
            compressor = zlib.compressobj(zlib_level, zlib.DEFLATED, -zlib.MAX_WBITS)
            return EncodeStream(destination, compressor.compress, compressor.flush)
        return None

    def compress(self, input_path: Path, output_path: Path, format_tag: str, level: CompressionLevel) -> bool:
        """Compresses input_path into output_path.

        Returns False without touching the filesystem when the format is not
        recognized. I/O and encoder errors propagate; a partially written output
        file is left where it is.
        """
        if not self.supports(format_tag):
            return False

        self.logger.debug(f"ENCODE: {input_path} -> {output_path} codec={codec_for(format_tag)} level={CompressionLevel(level).value}")
        with open(input_path, "rb") as source, open(output_path, "wb") as destination:
            with self.open_stream(format_tag, destination, level) as encoder:
                shutil.copyfileobj(source, encoder, self.chunk_size)
        return True
