import random

import pytest

from mpix.debayer import (
    convert_bggr8_to_rgb24_2x2,
    convert_bggr8_to_rgb24_3x3,
    convert_gbrg8_to_rgb24_2x2,
    convert_gbrg8_to_rgb24_3x3,
    convert_grbg8_to_rgb24_2x2,
    convert_grbg8_to_rgb24_3x3,
    convert_rggb8_to_rgb24_2x2,
    convert_rggb8_to_rgb24_3x3,
    debayer_frame,
    find_debayer,
)
from mpix.formats import Format, OperationNotFoundError

R, G, B = 200, 100, 50
CHANNELS = {"R": R, "G": G, "B": B}

LAYOUTS = {
    Format.SRGGB8: "RGGB",
    Format.SBGGR8: "BGGR",
    Format.BGGR8: "BGGR",
    Format.SGBRG8: "GBRG",
    Format.SGRBG8: "GRBG",
}


def _row(pattern: str, width: int) -> bytes:
    return bytes(CHANNELS[pattern[c % 2]] for c in range(width))


def _mosaic(layout: str, width: int, height: int) -> bytes:
    return b"".join(_row(layout[2 * (h % 2):2 * (h % 2) + 2], width) for h in range(height))


def _pixels(rgb: bytes):
    return [tuple(rgb[i:i + 3]) for i in range(0, len(rgb), 3)]


@pytest.mark.parametrize("fourcc", list(LAYOUTS))
def test_3x3_frame_recovers_channels(fourcc):
    width, height = 8, 6
    out = debayer_frame(_mosaic(LAYOUTS[fourcc], width, height), width, height, fourcc, 3)
    assert _pixels(out) == [(R, G, B)] * (width * height)


@pytest.mark.parametrize("fourcc", list(LAYOUTS))
def test_2x2_frame_recovers_channels_except_last_column(fourcc):
    width, height = 8, 6
    out = debayer_frame(_mosaic(LAYOUTS[fourcc], width, height), width, height, fourcc, 2)
    pixels = _pixels(out)
    assert len(pixels) == width * height
    for h in range(height):
        assert pixels[h * width:(h + 1) * width - 1] == [(R, G, B)] * (width - 1)


@pytest.mark.parametrize("fourcc,window", [
    (fmt, win) for fmt in LAYOUTS for win in (1, 2, 3) if (fmt, win) != (Format.BGGR8, 1)
])
def test_uniform_frame_stays_uniform(fourcc, window):
    width, height = 6, 4
    out = debayer_frame(bytes([77]) * (width * height), width, height, fourcc, window)
    assert out == bytes([77]) * (width * height * 3)


def test_1x1_replicates_raw_value_as_grey():
    width, height = 5, 3
    src = bytes(range(10, 10 + width * height))
    out = debayer_frame(src, width, height, Format.SRGGB8, 1)
    assert _pixels(out) == [(v, v, v) for v in src]


@pytest.mark.parametrize("fn,rows", [
    (convert_rggb8_to_rgb24_3x3, ("RG", "GB", "RG")),
    (convert_grbg8_to_rgb24_3x3, ("GR", "BG", "GR")),
    (convert_bggr8_to_rgb24_3x3, ("BG", "GR", "BG")),
    (convert_gbrg8_to_rgb24_3x3, ("GB", "RG", "GB")),
])
def test_3x3_line_on_mosaic(fn, rows):
    width = 10
    out = fn(*(_row(r, width) for r in rows), width)
    assert _pixels(out) == [(R, G, B)] * width


@pytest.mark.parametrize("fn,rows", [
    (convert_rggb8_to_rgb24_2x2, ("RG", "GB")),
    (convert_grbg8_to_rgb24_2x2, ("GR", "BG")),
    (convert_bggr8_to_rgb24_2x2, ("BG", "GR")),
    (convert_gbrg8_to_rgb24_2x2, ("GB", "RG")),
])
def test_2x2_line_on_mosaic(fn, rows):
    width = 10
    out = fn(*(_row(r, width) for r in rows), width)
    pixels = _pixels(out)
    assert len(pixels) == width
    assert pixels[:-1] == [(R, G, B)] * (width - 1)


@pytest.mark.parametrize("fn", [
    convert_rggb8_to_rgb24_3x3,
    convert_grbg8_to_rgb24_3x3,
    convert_bggr8_to_rgb24_3x3,
    convert_gbrg8_to_rgb24_3x3,
])
def test_3x3_line_values_stay_within_input_range(fn):
    rng = random.Random(42)
    width = 12
    lines = [bytes(rng.randrange(256) for _ in range(width)) for _ in range(3)]
    out = fn(*lines, width)
    everything = b"".join(lines)
    assert len(out) == width * 3
    assert min(everything) <= min(out)
    assert max(out) <= max(everything)


def test_find_debayer_matches_debayer_frame():
    width, height = 4, 4
    src = bytes(range(width * height))
    fn = find_debayer(Format.SGRBG8, 3)
    assert fn(src, width, height) == debayer_frame(src, width, height, Format.SGRBG8, 3)


@pytest.mark.parametrize("fourcc,window", [
    (Format.BGGR8, 1),
    (Format.SRGGB8, 4),
    (Format.RGB24, 3),
    (Format.GREY, 2),
])
def test_missing_operation(fourcc, window):
    with pytest.raises(OperationNotFoundError):
        find_debayer(fourcc, window)


def test_3x3_odd_width_rejected():
    with pytest.raises(ValueError):
        convert_rggb8_to_rgb24_3x3(bytes(5), bytes(5), bytes(5), 5)


def test_3x3_height_too_small_rejected():
    with pytest.raises(ValueError):
        debayer_frame(bytes(8), 4, 2, Format.SRGGB8, 3)


def test_2x2_odd_width_rejected():
    with pytest.raises(ValueError):
        convert_bggr8_to_rgb24_2x2(bytes(3), bytes(3), 3)


def test_short_frame_rejected():
    with pytest.raises(ValueError):
        debayer_frame(bytes(10), 4, 4, Format.SRGGB8, 2)