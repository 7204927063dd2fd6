# mpix

A small, dependency-free library for processing raw camera frames in pure
Python. Everything works on plain `bytes` (or any bytes-like) buffers and
returns new `bytes`.

What it offers:

- **Formats** (`mpix.formats`): the `Format` enum of four-character pixel
  format codes, `bits_per_pixel`, `fourcc` / `fourcc_to_str`, name lookups
  and the error classes.
- **Debayering** (`mpix.debayer`): 8-bit Bayer data (RGGB, BGGR, GBRG, GRBG)
  to RGB24 with 1x1, 2x2 or 3x3 windows.
- **Corrections** (`mpix.correction`): black level, white balance, gamma and
  3x3 colour matrix, applied line by line.
- **Kernels** (`mpix.kernel`): identity, edge detect, Gaussian blur, sharpen
  and median denoise, in 3x3 and 5x5 sizes, on RGB24 frames.
- **Resizing** (`mpix.resize`): nearest-neighbour subsampling.
- **QOI encoding** (`mpix.qoi`): RGB24 frames to QOI files.

## Installation

```
pip install .
```

## Formats and names

```python
from mpix.formats import Format, bits_per_pixel, fourcc_to_str, format_from_name

fmt = format_from_name("RGB565X")
print(fourcc_to_str(fmt))          # "RGBR"
print(bits_per_pixel(Format.YUYV)) # 16
```

`kernel_from_name`, `resize_from_name` and `correction_from_name` turn names
such as `"GAUSSIAN_BLUR"`, `"SUBSAMPLING"` or `"WHITE_BALANCE"` into
`KernelType`, `ResizeType` and `CorrectionType` values; an unknown name
raises `ValueError`. `bits_per_pixel` returns 0 for compressed or unknown
formats.

`LcgRandom` is a small linear congruential generator (`next_u32()`), and
`default_rng()` returns a shared instance of it.

## Debayering

```python
from mpix.formats import Format
from mpix.debayer import debayer_frame

raw = bytes(16 * 16)                                    # 16x16 RGGB frame
rgb = debayer_frame(raw, 16, 16, Format.SRGGB8, 3)      # 16 * 16 * 3 bytes
```

`find_debayer(fourcc, window_size)` returns the frame function
`(src, width, height) -> bytes`. 2x2 and 3x3 windows exist for `SRGGB8`,
`SGBRG8`, `SBGGR8`, `BGGR8` and `SGRBG8`; the 1x1 window turns each raw value
into a grey pixel and exists for the four `S*` formats. The line functions
(`convert_rggb8_to_rgb24_3x3`, `convert_bggr8_to_rgb24_2x2`, ...) are also
available. Widths must be even (at least 4 for 3x3, 2 for 2x2).

## Corrections

```python
from mpix.correction import (
    SCALE_BITS, BlackLevel, WhiteBalance, Gamma, ColorMatrix,
    correction_black_level_rgb24, correction_white_balance_rgb24,
    correction_gamma_rgb24, correction_color_matrix_rgb24,
)

line = bytes([40, 80, 120] * 8)
line = correction_black_level_rgb24(line, 8, BlackLevel(level=16))
line = correction_white_balance_rgb24(line, 8, WhiteBalance(red_level=1280, blue_level=768))
line = correction_gamma_rgb24(line, 8, Gamma(level=8 << 5))
```

Gains and matrix coefficients are fixed point, `1 << SCALE_BITS` meaning 1.0.
`Gamma.level >> 5` selects one of 15 curves and must be between 1 and 15.
`correction_color_matrix_rgb24` transforms the first `width - 2` pixels of the
line and passes the last two through unchanged. Raw 8-bit variants exist for
black level and gamma, and `find_correction(fourcc, correction_type)` picks the
right function for a format.

## Kernels

```python
from mpix.formats import Format, KernelType
from mpix.kernel import kernel_frame

frame = bytes(range(256)) * 3                 # 16x16 RGB24
blurred = kernel_frame(frame, 16, 16, Format.RGB24, KernelType.GAUSSIAN_BLUR, 5)
```

Edges are handled by repeating the edge row and column. Only RGB24 is
supported; a size other than 3 or 5 raises `UnsupportedFormatError`.
`kernel_line_3x3(rows, width, kernel_type)` and `kernel_line_5x5` filter a
single line from its neighbouring lines; `find_kernel` returns the frame
function.

## Resizing

```python
from mpix.resize import resize_frame_raw24

small = resize_frame_raw24(frame, 16, 16, 8, 8)
```

`resize_frame(src, src_width, src_height, dst_width, dst_height, bits_per_pixel)`
and `resize_line` work on any whole-byte pixel size; `find_resize(fourcc)`
returns the function for `RGB24`, `YUV24`, `RGB565`, `RGB565X`, `GREY` or
`RGB332`.

## QOI

```python
from mpix.qoi import qoi_encode

data = qoi_encode(frame, 16, 16)
assert data[:4] == b"qoif"
```

`QoiEncoder` encodes a frame line by line (`encode_line`) or pixel by pixel
(`encode_pixel`), keeping the run, previous-pixel and index-cache state
between calls.

## Errors

All package errors derive from `MpixError`. A missing operation for a
format raises `OperationNotFoundError`; an unsupported parameter raises
`UnsupportedFormatError`. Buffers that are too short or sizes that an
operation cannot handle raise `ValueError`.

## What it does not do

- No conversion between pixel formats such as RGB24, RGB565, YUV or grey,
  other than debayering raw data to RGB24.
- No image pipeline object chaining operations; each function works on its
  own buffer.
- No frame statistics, automatic exposure or white balance, palettes, random
  sampling or terminal preview and hexdumps.
- No JPEG encoding and no binning resize: `Format.JPEG` and
  `ResizeType.BINNING` are only enum values.
- No command-line tool.

## Running the tests

```
pip install .[test]
pytest
```