"""Convolution and median filters over 3x3 or 5x5 pixel neighbourhoods."""

from __future__ import annotations

from functools import partial
from operator import mul
from typing import Callable, Sequence

from mpix.formats import (
    Format,
    KernelType,
    OperationNotFoundError,
    UnsupportedFormatError,
    fourcc_to_str,
)

PixelFn = Callable[[Sequence[int]], int]
KernelFn = Callable[[bytes, int, int], bytes]

_CHANNELS = 3

# Coefficients row by row, followed by the right shift applied to the sum.
_CONVOLUTIONS: dict[int, dict[KernelType, tuple[tuple[int, ...], int]]] = {
    3: {
        KernelType.IDENTITY: ((
            0, 0, 0,
            0, 1, 0,
            0, 0, 0,
        ), 0),
        KernelType.EDGE_DETECT: ((
            -1, -1, -1,
            -1, 8, -1,
            -1, -1, -1,
        ), 0),
        KernelType.GAUSSIAN_BLUR: ((
            1, 2, 1,
            2, 4, 2,
            1, 2, 1,
        ), 4),
        KernelType.SHARPEN: ((
            0, -1, 0,
            -1, 5, -1,
            0, -1, 0,
        ), 0),
    },
    5: {
        KernelType.IDENTITY: ((
            0, 0, 0, 0, 0,
            0, 0, 0, 0, 0,
            0, 0, 1, 0, 0,
            0, 0, 0, 0, 0,
            0, 0, 0, 0, 0,
        ), 0),
        # Laplacian-style: centre +24, all 24 neighbours -1
        KernelType.EDGE_DETECT: ((
            -1, -1, -1, -1, -1,
            -1, -1, -1, -1, -1,
            -1, -1, 24, -1, -1,
            -1, -1, -1, -1, -1,
            -1, -1, -1, -1, -1,
        ), 0),
        KernelType.GAUSSIAN_BLUR: ((
            1, 4, 6, 4, 1,
            4, 16, 24, 16, 4,
            6, 24, 36, 24, 6,
            4, 16, 24, 16, 4,
            1, 4, 6, 4, 1,
        ), 8),
        # Unsharp masking
        KernelType.SHARPEN: ((
            -1, -4, -6, -4, -1,
            -4, -16, -24, -16, -4,
            -6, -24, 476, -24, -6,
            -4, -16, -24, -16, -4,
            -1, -4, -6, -4, -1,
        ), 8),
    },
}


def _clamp8(value: int) -> int:
    return max(0x00, min(0xFF, value))


def _clamp(value: int, low: int, high: int) -> int:
    return max(low, min(high, value))


def _convolve(coefficients: tuple[int, ...], shift: int, window: Sequence[int]) -> int:
    return _clamp8(sum(map(mul, window, coefficients)) >> shift)


def _median(size: int, window: Sequence[int]) -> int:
    """Median found by binary search over the 8-bit range, in 8 steps."""
    pivot_bot, pivot_top = 0x00, 0xFF
    half = size * size // 2
    for _ in range(8):
        median = (pivot_top + pivot_bot) // 2
        num_higher = sum(1 for value in window if value > median)
        if num_higher > half:
            pivot_bot = median
        elif num_higher < half:
            pivot_top = median
    return (pivot_top + pivot_bot) // 2


def _pixel_fn(kernel_type: int, size: int) -> PixelFn:
    if size not in _CONVOLUTIONS:
        raise UnsupportedFormatError(
            f"unsupported kernel size {size}, only supporting 3 or 5"
        )
    if kernel_type == KernelType.DENOISE:
        return partial(_median, size)
    try:
        coefficients, shift = _CONVOLUTIONS[size][kernel_type]
    except KeyError:
        raise OperationNotFoundError(
            f"kernel operation {int(kernel_type)} of size {size}x{size} not found"
        ) from None
    return partial(_convolve, coefficients, shift)


def _kernel_line(rows, width: int, size: int, pixel_fn: PixelFn) -> bytes:
    if len(rows) != size:
        raise ValueError(f"a {size}x{size} kernel needs {size} lines, got {len(rows)}")
    if width < size:
        raise ValueError(f"a {size}x{size} kernel needs a width of at least {size}, got {width}")
    pitch = width * _CHANNELS
    lines = [bytes(row[:pitch]) for row in rows]
    if any(len(line) < pitch for line in lines):
        raise ValueError(f"every line must hold at least {pitch} bytes")

    radius = size // 2
    out = bytearray()
    for x in range(width):
        # Columns past the edges repeat the edge column
        cols = [_clamp(x + d, 0, width - 1) * _CHANNELS for d in range(-radius, radius + 1)]
        for channel in range(_CHANNELS):
            window = [line[col + channel] for line in lines for col in cols]
            out.append(pixel_fn(window))
    return bytes(out)


def kernel_line_3x3(rows, width: int, kernel_type: int) -> bytes:
    """Filter the middle one of three RGB24 lines with a 3x3 kernel."""
    return _kernel_line(rows, width, 3, _pixel_fn(kernel_type, 3))


def kernel_line_5x5(rows, width: int, kernel_type: int) -> bytes:
    """Filter the middle one of five RGB24 lines with a 5x5 kernel."""
    return _kernel_line(rows, width, 5, _pixel_fn(kernel_type, 5))


def _kernel_frame(pixel_fn: PixelFn, size: int, src, width: int, height: int) -> bytes:
    if height < size:
        raise ValueError(
            f"a {size}x{size} kernel needs a height of at least {size}, got {height}"
        )
    pitch = width * _CHANNELS
    data = bytes(src)
    if len(data) < pitch * height:
        raise ValueError(f"frame holds {len(data)} bytes, {pitch * height} needed")
    rows = [data[h * pitch:(h + 1) * pitch] for h in range(height)]

    radius = size // 2
    out = []
    for y in range(height):
        # Lines past the top and bottom repeat the edge line
        window_rows = [rows[_clamp(y + d, 0, height - 1)] for d in range(-radius, radius + 1)]
        out.append(_kernel_line(window_rows, width, size, pixel_fn))
    return b"".join(out)


def find_kernel(fourcc: int, kernel_type: int, size: int) -> KernelFn:
    """Frame function ``(src, width, height) -> bytes`` for a format, kernel type and size."""
    if size not in _CONVOLUTIONS:
        raise UnsupportedFormatError(
            f"unsupported kernel size {size}, only supporting 3 or 5"
        )
    if fourcc != Format.RGB24:
        raise OperationNotFoundError(
            f"kernel operation {int(kernel_type)} of size {size}x{size} on "
            f"{fourcc_to_str(fourcc)} data not found"
        )
    return partial(_kernel_frame, _pixel_fn(kernel_type, size), size)


def kernel_frame(src, width: int, height: int, fourcc: int, kernel_type: int,
                 size: int) -> bytes:
    """Filter a whole frame with a 3x3 or 5x5 kernel."""
    return find_kernel(fourcc, kernel_type, size)(src, width, height)