"""Colour corrections applied line by line: black level, white balance, gamma, colour matrix."""

from __future__ import annotations

from dataclasses import dataclass, field
from itertools import islice
from typing import Callable, Iterator, Union

from mpix.formats import CorrectionType, Format, OperationNotFoundError, fourcc_to_str

SCALE_BITS = 10
"""Fixed-point scale of gains and matrix coefficients: 1 << SCALE_BITS stands for 1.0."""

_UNITY = 1 << SCALE_BITS


@dataclass
class BlackLevel:
    """Value subtracted from every channel."""

    level: int = 0


@dataclass
class WhiteBalance:
    """Fixed-point gains applied to the red and blue channels."""

    red_level: int = _UNITY
    blue_level: int = _UNITY


@dataclass
class Gamma:
    """Gamma strength; ``level >> 5`` selects the curve, from 1 to 15 sixteenths."""

    level: int = 8 << 5


@dataclass
class ColorMatrix:
    """3x3 fixed-point matrix, row by row, mapping input RGB to output RGB."""

    levels: tuple[int, ...] = field(
        default_factory=lambda: (_UNITY, 0, 0, 0, _UNITY, 0, 0, 0, _UNITY)
    )


Correction = Union[BlackLevel, WhiteBalance, Gamma, ColorMatrix]
CorrectionFn = Callable[[bytes, int, Correction], bytes]


def _take(src, width: int, bytes_per_pixel: int) -> bytes:
    size = width * bytes_per_pixel
    data = bytes(src[:size])
    if len(data) < size:
        raise ValueError(f"input holds {len(data)} bytes, {size} needed for {width} pixels")
    return data


def _triples(data: bytes) -> Iterator[tuple[int, int, int]]:
    return zip(data[0::3], data[1::3], data[2::3])


def _clamp8(value: int) -> int:
    return max(0x00, min(0xFF, value))


def correction_black_level_raw8(src, width: int, corr: BlackLevel) -> bytes:
    """Subtract the black level from every byte of a single-channel line."""
    level = corr.level
    return bytes(max(0, value - level) & 0xFF for value in _take(src, width, 1))


def correction_black_level_rgb24(src, width: int, corr: BlackLevel) -> bytes:
    """Subtract the black level from every channel of an RGB24 line."""
    level = corr.level & 0xFF
    return bytes(max(0, value - level) for value in _take(src, width, 3))


def correction_white_balance_rgb24(src, width: int, corr: WhiteBalance) -> bytes:
    """Scale the red and blue channels of an RGB24 line, saturating at 255."""
    red, blue = corr.red_level, corr.blue_level
    out = bytearray()
    for r, g, b in _triples(_take(src, width, 3)):
        out += bytes((min(r * red >> SCALE_BITS, 0xFF), g, min(b * blue >> SCALE_BITS, 0xFF)))
    return bytes(out)


_GAMMA_Y = (
    (181, 197, 215, 234),  # gamma = 1 / 16
    (128, 152, 181, 215),  # gamma = 2 / 16
    (90, 117, 152, 197),  # gamma = 3 / 16
    (64, 90, 128, 181),  # gamma = 4 / 16
    (45, 69, 107, 165),  # gamma = 5 / 16
    (32, 53, 90, 152),  # gamma = 6 / 16
    (22, 41, 76, 139),  # gamma = 7 / 16
    (16, 32, 64, 128),  # gamma = 8 / 16
    (11, 24, 53, 117),  # gamma = 9 / 16
    (8, 19, 45, 107),  # gamma = 10 / 16
    (5, 14, 38, 98),  # gamma = 11 / 16
    (4, 11, 32, 90),  # gamma = 12 / 16
    (2, 8, 26, 82),  # gamma = 13 / 16
    (2, 6, 22, 76),  # gamma = 14 / 16
    (1, 5, 19, 69),  # gamma = 15 / 16
)
_GAMMA_X = (1, 4, 16, 64)


def _gamma_curve(corr: Gamma) -> tuple[int, ...]:
    step = corr.level >> 5
    if not 1 <= step <= len(_GAMMA_Y):
        raise ValueError(f"gamma level {corr.level} out of range, level >> 5 must be 1 to 15")
    return _GAMMA_Y[step - 1]


def _gamma_value(raw: int, ys: tuple[int, ...]) -> int:
    if raw == 0:
        return 0
    x0 = 0
    for i, x1 in enumerate(_GAMMA_X):
        if raw < x1:
            y0, y1 = ys[i - 1], ys[i]
            break
        x0 = x1
    else:
        y0, x1, y1 = ys[-1], 0xFF, 0xFF
    # Linear interpolation between the two surrounding points of the curve
    return ((x1 - raw) * y0 + (raw - x0) * y1) // (x1 - x0)


def correction_gamma_raw8(src, width: int, corr: Gamma) -> bytes:
    """Apply a gamma curve to every byte of a single-channel line."""
    ys = _gamma_curve(corr)
    return bytes(_gamma_value(value, ys) for value in _take(src, width, 1))


def correction_gamma_rgb24(src, width: int, corr: Gamma) -> bytes:
    """Apply a gamma curve to every channel of an RGB24 line."""
    ys = _gamma_curve(corr)
    return bytes(_gamma_value(value, ys) for value in _take(src, width, 3))


def correction_color_matrix_rgb24(src, width: int, corr: ColorMatrix) -> bytes:
    """Multiply each RGB24 pixel by a colour matrix.

    Only the first ``width - 2`` pixels are transformed; the last two are passed through.
    """
    levels = tuple(corr.levels)
    if len(levels) != 9:
        raise ValueError(f"a colour matrix needs 9 coefficients, got {len(levels)}")
    data = _take(src, width, 3)
    out = bytearray(data)
    rows = (levels[0:3], levels[3:6], levels[6:9])
    for n, pixel in enumerate(islice(_triples(data), max(0, width - 2))):
        out[n * 3:n * 3 + 3] = bytes(
            _clamp8(sum(value * coef >> SCALE_BITS for value, coef in zip(pixel, row)))
            for row in rows
        )
    return bytes(out)


_RAW8_FORMATS = (
    Format.BGGR8, Format.SBGGR8, Format.SRGGB8, Format.SGRBG8, Format.SGBRG8, Format.GREY,
)

_CORRECTIONS: dict[tuple[CorrectionType, Format], CorrectionFn] = {
    **{(CorrectionType.BLACK_LEVEL, f): correction_black_level_raw8 for f in _RAW8_FORMATS},
    (CorrectionType.BLACK_LEVEL, Format.RGB24): correction_black_level_rgb24,
    (CorrectionType.WHITE_BALANCE, Format.RGB24): correction_white_balance_rgb24,
    **{(CorrectionType.GAMMA, f): correction_gamma_raw8 for f in _RAW8_FORMATS},
    (CorrectionType.GAMMA, Format.RGB24): correction_gamma_rgb24,
    (CorrectionType.COLOR_MATRIX, Format.RGB24): correction_color_matrix_rgb24,
}


def find_correction(fourcc: int, correction_type: int) -> CorrectionFn:
    """Line correction function for a pixel format and a correction type."""
    try:
        return _CORRECTIONS[(correction_type, fourcc)]
    except KeyError:
        raise OperationNotFoundError(
            f"correction operation {int(correction_type)} on {fourcc_to_str(fourcc)} "
            "data not found"
        ) from None