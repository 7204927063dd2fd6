"""Pixel formats, enumerations, errors and the shared pseudo-random generator."""

from __future__ import annotations

import errno
from dataclasses import dataclass
from enum import IntEnum


def fourcc(code: str) -> int:
    """Pack a four-character code into its 32-bit integer value."""
    if len(code) != 4:
        raise ValueError(f"a four-character code needs exactly 4 characters, got {code!r}")
    return int.from_bytes(code.encode("latin-1"), "little")


def fourcc_to_str(value: int) -> str:
    """Unpack a 32-bit four-character code into its text form."""
    return (int(value) & 0xFFFFFFFF).to_bytes(4, "little").decode("latin-1")


class Format(IntEnum):
    """Pixel formats, valued by their four-character code."""

    RGB332 = fourcc("RGB1")
    RGB565 = fourcc("RGBP")
    RGB565X = fourcc("RGBR")
    RGB24 = fourcc("RGB3")
    XRGB32 = fourcc("BX24")
    YUV12 = fourcc("YU12")
    YUV24 = fourcc("YUV3")
    YUYV = fourcc("YUYV")
    GREY = fourcc("GREY")
    SBGGR8 = fourcc("BA81")
    BGGR8 = fourcc("BGGR")
    SGBRG8 = fourcc("GBRG")
    SGRBG8 = fourcc("GRBG")
    SRGGB8 = fourcc("RGGB")
    PALETTE1 = fourcc("PLT1")
    PALETTE2 = fourcc("PLT2")
    PALETTE3 = fourcc("PLT3")
    PALETTE4 = fourcc("PLT4")
    PALETTE5 = fourcc("PLT5")
    PALETTE6 = fourcc("PLT6")
    PALETTE7 = fourcc("PLT7")
    PALETTE8 = fourcc("PLT8")
    JPEG = fourcc("JPEG")
    QOI = fourcc("qoif")


class KernelType(IntEnum):
    IDENTITY = 1
    EDGE_DETECT = 2
    GAUSSIAN_BLUR = 3
    SHARPEN = 4
    DENOISE = 5


class ResizeType(IntEnum):
    SUBSAMPLING = 1
    BINNING = 2


class CorrectionType(IntEnum):
    BLACK_LEVEL = 1
    WHITE_BALANCE = 2
    GAMMA = 3
    COLOR_MATRIX = 4


class JpegQuality(IntEnum):
    DEFAULT = 0


class MpixError(Exception):
    """Base class of every error raised by this package."""

    errno = errno.EIO


class OperationNotFoundError(MpixError):
    """No operation is registered for the requested formats or parameters."""

    errno = errno.ENOSYS


class UnsupportedFormatError(MpixError):
    """The pixel format or parameter is not supported by this function."""

    errno = errno.ENOTSUP


class PipelineError(MpixError):
    """An image pipeline could not be built or run."""

    def __init__(self, message: str, code: int = errno.ECANCELED) -> None:
        super().__init__(message)
        self.errno = code


_BITS_PER_PIXEL = {
    Format.RGB332: 8,
    Format.RGB565: 16,
    Format.RGB565X: 16,
    Format.RGB24: 24,
    Format.XRGB32: 32,
    Format.YUV12: 12,
    Format.YUV24: 24,
    Format.YUYV: 16,
    Format.GREY: 8,
    Format.SBGGR8: 8,
    Format.BGGR8: 8,
    Format.SGBRG8: 8,
    Format.SGRBG8: 8,
    Format.SRGGB8: 8,
    Format.PALETTE1: 1,
    Format.PALETTE2: 2,
    Format.PALETTE3: 3,
    Format.PALETTE4: 4,
    Format.PALETTE5: 5,
    Format.PALETTE6: 6,
    Format.PALETTE7: 7,
    Format.PALETTE8: 8,
}


def bits_per_pixel(fmt: int) -> int:
    """Bits used by one pixel of an uncompressed format; 0 when unknown or compressed."""
    return _BITS_PER_PIXEL.get(fmt, 0)


def _lookup(enum_cls, name: str, kind: str):
    try:
        return enum_cls[name]
    except KeyError:
        raise ValueError(f"unknown {kind} name: {name!r}") from None


def format_from_name(name: str) -> Format:
    return _lookup(Format, name, "format")


def kernel_from_name(name: str) -> KernelType:
    return _lookup(KernelType, name, "kernel")


def resize_from_name(name: str) -> ResizeType:
    return _lookup(ResizeType, name, "resize")


def correction_from_name(name: str) -> CorrectionType:
    return _lookup(CorrectionType, name, "correction")


@dataclass
class LcgRandom:
    """Linear congruential generator: fast, low quality, good enough for sampling."""

    state: int = 0

    def next_u32(self) -> int:
        self.state = (self.state * 1103515245 + 12345) & 0xFFFFFFFF
        return self.state


_DEFAULT_RNG = LcgRandom()


def default_rng() -> LcgRandom:
    """The generator shared by callers that do not bring their own."""
    return _DEFAULT_RNG