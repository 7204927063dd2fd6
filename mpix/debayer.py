"""Demosaicing of raw Bayer frames into RGB24 using 1x1, 2x2 or 3x3 windows."""

from __future__ import annotations

from functools import partial
from typing import Callable, Sequence

from mpix.formats import Format, OperationNotFoundError, fourcc_to_str

DebayerFn = Callable[[bytes, int, int], bytes]
Rgb = tuple[int, int, int]


def _take(src, width: int) -> bytes:
    data = bytes(src[:width])
    if len(data) < width:
        raise ValueError(f"line holds {len(data)} bytes, {width} needed")
    return data


# 3x3 windows: each argument is three consecutive pixels of one row, the output pixel
# being the centre one. The name gives the colours of the top-left 2x2 of the window.

def _rggb_3x3(rgr0: Sequence[int], gbg1: Sequence[int], rgr2: Sequence[int]) -> Rgb:
    return (
        (rgr0[0] + rgr0[2] + rgr2[0] + rgr2[2]) // 4,
        (rgr0[1] + gbg1[2] + gbg1[0] + rgr2[1]) // 4,
        gbg1[1],
    )


def _bggr_3x3(bgb0: Sequence[int], grg1: Sequence[int], bgb2: Sequence[int]) -> Rgb:
    return (
        grg1[1],
        (bgb0[1] + grg1[2] + grg1[0] + bgb2[1]) // 4,
        (bgb0[0] + bgb0[2] + bgb2[0] + bgb2[2]) // 4,
    )


def _grbg_3x3(grg0: Sequence[int], bgb1: Sequence[int], grg2: Sequence[int]) -> Rgb:
    return (
        (grg0[1] + grg2[1]) // 2,
        bgb1[1],
        (bgb1[0] + bgb1[2]) // 2,
    )


def _gbrg_3x3(gbg0: Sequence[int], rgr1: Sequence[int], gbg2: Sequence[int]) -> Rgb:
    return (
        (rgr1[0] + rgr1[2]) // 2,
        rgr1[1],
        (gbg0[1] + gbg2[1]) // 2,
    )


def _line_3x3(i0, i1, i2, width: int, even_fn, odd_fn) -> bytes:
    if width < 4 or width % 2 != 0:
        raise ValueError(f"3x3 debayer needs an even width of at least 4, got {width}")
    rows = [_take(row, width) for row in (i0, i1, i2)]

    # Left edge: the column after the first one is mirrored to fill the gap
    out = bytearray(odd_fn(*(bytes((r[1], r[0], r[1])) for r in rows)))
    for c in range(0, width - 3, 2):
        out += bytes(even_fn(*(r[c:c + 3] for r in rows)))
        out += bytes(odd_fn(*(r[c + 1:c + 4] for r in rows)))
    # Right edge: the column before the last one is mirrored
    out += bytes(even_fn(*(bytes((r[-2], r[-1], r[-2])) for r in rows)))
    return bytes(out)


def convert_rggb8_to_rgb24_3x3(i0, i1, i2, width: int) -> bytes:
    """Debayer the middle of three lines whose first pixels form an RGGB window."""
    return _line_3x3(i0, i1, i2, width, _rggb_3x3, _grbg_3x3)


def convert_grbg8_to_rgb24_3x3(i0, i1, i2, width: int) -> bytes:
    """Debayer the middle of three lines whose first pixels form a GRBG window."""
    return _line_3x3(i0, i1, i2, width, _grbg_3x3, _rggb_3x3)


def convert_bggr8_to_rgb24_3x3(i0, i1, i2, width: int) -> bytes:
    """Debayer the middle of three lines whose first pixels form a BGGR window."""
    return _line_3x3(i0, i1, i2, width, _bggr_3x3, _gbrg_3x3)


def convert_gbrg8_to_rgb24_3x3(i0, i1, i2, width: int) -> bytes:
    """Debayer the middle of three lines whose first pixels form a GBRG window."""
    return _line_3x3(i0, i1, i2, width, _gbrg_3x3, _bggr_3x3)


# 2x2 windows: the four values are top-left, top-right, bottom-left, bottom-right.

def _rggb_2x2(r0: int, g0: int, g1: int, b0: int) -> Rgb:
    return r0, (g0 + g1) // 2, b0


def _gbrg_2x2(g0: int, b0: int, r0: int, g1: int) -> Rgb:
    return r0, (g0 + g1) // 2, b0


def _bggr_2x2(b0: int, g0: int, g1: int, r0: int) -> Rgb:
    return r0, (g0 + g1) // 2, b0


def _grbg_2x2(g0: int, r0: int, b0: int, g1: int) -> Rgb:
    return r0, (g0 + g1) // 2, b0


def _line_2x2(src0, src1, width: int, even_fn, odd_fn) -> bytes:
    if width < 2 or width % 2 != 0:
        raise ValueError(f"2x2 debayer needs an even width of at least 2, got {width}")
    s0, s1 = _take(src0, width), _take(src1, width)
    out = bytearray()
    for c in range(0, width - 2, 2):
        out += bytes(even_fn(s0[c], s0[c + 1], s1[c], s1[c + 1]))
        out += bytes(odd_fn(s0[c + 1], s0[c + 2], s1[c + 1], s1[c + 2]))
    # Last pair: the right neighbour of the last pixel is taken from its left side
    c = width - 2
    left = c - 1 if c > 0 else c + 1
    out += bytes(even_fn(s0[c], s0[c + 1], s1[c], s1[c + 1]))
    out += bytes(odd_fn(s0[c + 1], s0[left], s1[c + 1], s1[left]))
    return bytes(out)


def convert_rggb8_to_rgb24_2x2(src0, src1, width: int) -> bytes:
    """Debayer one line from two lines starting with an RGGB cell."""
    return _line_2x2(src0, src1, width, _rggb_2x2, _grbg_2x2)


def convert_bggr8_to_rgb24_2x2(src0, src1, width: int) -> bytes:
    """Debayer one line from two lines starting with a BGGR cell."""
    return _line_2x2(src0, src1, width, _bggr_2x2, _gbrg_2x2)


def convert_gbrg8_to_rgb24_2x2(src0, src1, width: int) -> bytes:
    """Debayer one line from two lines starting with a GBRG cell."""
    return _line_2x2(src0, src1, width, _gbrg_2x2, _bggr_2x2)


def convert_grbg8_to_rgb24_2x2(src0, src1, width: int) -> bytes:
    """Debayer one line from two lines starting with a GRBG cell."""
    return _line_2x2(src0, src1, width, _grbg_2x2, _rggb_2x2)


def _rows(src, width: int, height: int) -> list[bytes]:
    data = bytes(src)
    if len(data) < width * height:
        raise ValueError(f"frame holds {len(data)} bytes, {width * height} needed")
    return [data[h * width:(h + 1) * width] for h in range(height)]


def _frame_3x3(fn0, fn1, src, width: int, height: int) -> bytes:
    if height < 3:
        raise ValueError(f"3x3 debayer needs a height of at least 3, got {height}")
    rows = _rows(src, width, height)
    # Top line: the second line is repeated above the first one
    out = [fn1(rows[1], rows[0], rows[1], width)]
    for p in range(height - 2):
        fn = fn0 if p % 2 == 0 else fn1
        out.append(fn(rows[p], rows[p + 1], rows[p + 2], width))
    # Bottom line: the line before the last one is repeated below it
    out.append(fn0(rows[-2], rows[-1], rows[-2], width))
    return b"".join(out)


def _frame_2x2(fn0, fn1, src, width: int, height: int) -> bytes:
    if height < 2:
        raise ValueError(f"2x2 debayer needs a height of at least 2, got {height}")
    rows = _rows(src, width, height)
    out = []
    for p in range(height - 1):
        fn = fn0 if p % 2 == 0 else fn1
        out.append(fn(rows[p], rows[p + 1], width))
    out.append(fn1(rows[-1], rows[-2], width))
    return b"".join(out)


def _frame_1x1(src, width: int, height: int) -> bytes:
    """Every raw value becomes a grey pixel."""
    data = b"".join(_rows(src, width, height))
    return bytes(value for value in data for _ in range(3))


_DEBAYERS: dict[tuple[Format, int], DebayerFn] = {
    (Format.SRGGB8, 3): partial(_frame_3x3, convert_rggb8_to_rgb24_3x3,
                                convert_gbrg8_to_rgb24_3x3),
    (Format.SGBRG8, 3): partial(_frame_3x3, convert_gbrg8_to_rgb24_3x3,
                                convert_rggb8_to_rgb24_3x3),
    (Format.SBGGR8, 3): partial(_frame_3x3, convert_bggr8_to_rgb24_3x3,
                                convert_grbg8_to_rgb24_3x3),
    (Format.BGGR8, 3): partial(_frame_3x3, convert_bggr8_to_rgb24_3x3,
                               convert_grbg8_to_rgb24_3x3),
    (Format.SGRBG8, 3): partial(_frame_3x3, convert_grbg8_to_rgb24_3x3,
                                convert_bggr8_to_rgb24_3x3),
    (Format.SRGGB8, 2): partial(_frame_2x2, convert_rggb8_to_rgb24_2x2,
                                convert_gbrg8_to_rgb24_2x2),
    (Format.SGBRG8, 2): partial(_frame_2x2, convert_gbrg8_to_rgb24_2x2,
                                convert_rggb8_to_rgb24_2x2),
    (Format.SBGGR8, 2): partial(_frame_2x2, convert_bggr8_to_rgb24_2x2,
                                convert_grbg8_to_rgb24_2x2),
    (Format.BGGR8, 2): partial(_frame_2x2, convert_bggr8_to_rgb24_2x2,
                               convert_grbg8_to_rgb24_2x2),
    (Format.SGRBG8, 2): partial(_frame_2x2, convert_grbg8_to_rgb24_2x2,
                                convert_bggr8_to_rgb24_2x2),
    (Format.SRGGB8, 1): _frame_1x1,
    (Format.SBGGR8, 1): _frame_1x1,
    (Format.SGBRG8, 1): _frame_1x1,
    (Format.SGRBG8, 1): _frame_1x1,
}


def find_debayer(fourcc: int, window_size: int) -> DebayerFn:
    """Frame function ``(src, width, height) -> rgb24`` for a Bayer format and window size."""
    try:
        return _DEBAYERS[(fourcc, window_size)]
    except KeyError:
        raise OperationNotFoundError(
            f"debayer operation from {fourcc_to_str(fourcc)} to "
            f"{fourcc_to_str(Format.RGB24)} using {window_size}x{window_size} window not found"
        ) from None


def debayer_frame(src, width: int, height: int, fourcc: int, window_size: int) -> bytes:
    """Convert a whole raw Bayer frame into RGB24."""
    return find_debayer(fourcc, window_size)(src, width, height)