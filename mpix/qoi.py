"""Encoding of RGB24 frames into the QOI image format."""

from __future__ import annotations

from dataclasses import dataclass, field

_OP_INDEX = 0x00
_OP_DIFF = 0x40
_OP_LUMA = 0x80
_OP_RUN = 0xC0
_OP_RGB = 0xFE

_MAX_RUN = 62
_END_MARKER = bytes(7) + b"\x01"


def _int8(value: int) -> int:
    return (value + 128) % 256 - 128


@dataclass
class QoiEncoder:
    """Streaming QOI encoder keeping the state carried between pixels and lines."""

    width: int
    height: int
    prev: tuple[int, int, int] = (0, 0, 0)
    cache: list[tuple[int, int, int]] = field(default_factory=lambda: [(0, 0, 0)] * 64)
    run_length: int = 0

    def header(self) -> bytes:
        """File header: magic, width, height, 3 channels, sRGB colour space."""
        return (
            b"qoif"
            + self.width.to_bytes(4, "big")
            + self.height.to_bytes(4, "big")
            + bytes((3, 0))
        )

    def encode_pixel(self, rgb, is_last: bool = False) -> bytes:
        """Encode one pixel; a pending run is flushed when ``is_last`` is set."""
        r, g, b = rgb[0], rgb[1], rgb[2]
        pixel = (r, g, b)
        out = bytearray()

        if pixel == self.prev:
            self.run_length += 1
            if self.run_length >= _MAX_RUN or is_last:
                out.append(_OP_RUN | (self.run_length - 1))
                self.run_length = 0
            return bytes(out)
        if self.run_length > 0:
            out.append(_OP_RUN | (self.run_length - 1))
            self.run_length = 0

        cache_idx = (r * 3 + g * 5 + b * 7 + 0xFF * 11) % 64
        if self.cache[cache_idx] == pixel:
            out.append(_OP_INDEX | cache_idx)
            self.prev = pixel
            return bytes(out)
        self.cache[cache_idx] = pixel

        # Differences with the previous pixel, wrapping around
        dr = _int8(r - self.prev[0])
        dg = _int8(g - self.prev[1])
        db = _int8(b - self.prev[2])
        dgr = _int8(dr - dg)
        dgb = _int8(db - dg)
        self.prev = pixel

        if -2 <= dr <= 1 and -2 <= dg <= 1 and -2 <= db <= 1:
            out.append(_OP_DIFF | (dr + 2) << 4 | (dg + 2) << 2 | (db + 2))
        elif -8 <= dgr <= 7 and -32 <= dg <= 31 and -8 <= dgb <= 7:
            out.append(_OP_LUMA | (dg + 32))
            out.append((dgr + 8) << 4 | (dgb + 8))
        else:
            out += bytes((_OP_RGB, r, g, b))
        return bytes(out)

    def encode_line(self, line, is_first: bool = False, is_last: bool = False) -> bytes:
        """Encode one RGB24 line, with the header when first and the end marker when last."""
        if self.width <= 0:
            raise ValueError("image width must be positive")
        size = self.width * 3
        data = bytes(line[:size])
        if len(data) < size:
            raise ValueError(f"line holds {len(data)} bytes, {size} needed")

        out = bytearray(self.header() if is_first else b"")
        pixels = list(zip(data[0::3], data[1::3], data[2::3]))
        for pixel in pixels[:-1]:
            out += self.encode_pixel(pixel, False)
        out += self.encode_pixel(pixels[-1], is_last)
        if is_last:
            out += _END_MARKER
        return bytes(out)


def qoi_encode(buf, width: int, height: int) -> bytes:
    """Encode a whole RGB24 frame into a QOI file."""
    if width <= 0 or height <= 0:
        raise ValueError("image dimensions must be positive")
    pitch = width * 3
    data = bytes(buf)
    if len(data) < pitch * height:
        raise ValueError(f"frame holds {len(data)} bytes, {pitch * height} needed")

    encoder = QoiEncoder(width, height)
    return b"".join(
        encoder.encode_line(data[h * pitch:(h + 1) * pitch], h == 0, h == height - 1)
        for h in range(height)
    )