"""Nearest-neighbour resizing of frames by subsampling."""

from __future__ import annotations

from typing import Callable

from mpix.formats import Format, OperationNotFoundError, fourcc_to_str

ResizeFn = Callable[[bytes, int, int, int, int], bytes]


def resize_line(src, src_width: int, dst_width: int, bits_per_pixel: int) -> bytes:
    """Resample one line of pixels to a new width by picking the nearest pixel."""
    step = bits_per_pixel // 8
    data = bytes(src[:src_width * step])
    if len(data) < src_width * step:
        raise ValueError(f"line holds {len(data)} bytes, {src_width * step} needed")
    out = bytearray()
    for dst_w in range(dst_width):
        src_i = dst_w * src_width // dst_width * step
        out += data[src_i:src_i + step]
    return bytes(out)


def resize_frame(src, src_width: int, src_height: int, dst_width: int, dst_height: int,
                 bits_per_pixel: int) -> bytes:
    """Resample a whole frame to new dimensions by picking the nearest pixel."""
    pitch = src_width * bits_per_pixel // 8
    data = bytes(src)
    if len(data) < pitch * src_height:
        raise ValueError(f"frame holds {len(data)} bytes, {pitch * src_height} needed")
    out = bytearray()
    for dst_h in range(dst_height):
        src_i = dst_h * src_height // dst_height * pitch
        out += resize_line(data[src_i:src_i + pitch], src_width, dst_width, bits_per_pixel)
    return bytes(out)


def resize_frame_raw24(src, src_width: int, src_height: int,
                       dst_width: int, dst_height: int) -> bytes:
    return resize_frame(src, src_width, src_height, dst_width, dst_height, 24)


def resize_frame_raw16(src, src_width: int, src_height: int,
                       dst_width: int, dst_height: int) -> bytes:
    return resize_frame(src, src_width, src_height, dst_width, dst_height, 16)


def resize_frame_raw8(src, src_width: int, src_height: int,
                      dst_width: int, dst_height: int) -> bytes:
    return resize_frame(src, src_width, src_height, dst_width, dst_height, 8)


_RESIZERS: dict[Format, ResizeFn] = {
    Format.RGB24: resize_frame_raw24,
    Format.YUV24: resize_frame_raw24,
    Format.RGB565: resize_frame_raw16,
    Format.RGB565X: resize_frame_raw16,
    Format.GREY: resize_frame_raw8,
    Format.RGB332: resize_frame_raw8,
}


def find_resize(fourcc: int) -> ResizeFn:
    """Frame resizing function for a pixel format."""
    try:
        return _RESIZERS[fourcc]
    except KeyError:
        raise OperationNotFoundError(
            f"resize operation for {fourcc_to_str(fourcc)} not found"
        ) from None