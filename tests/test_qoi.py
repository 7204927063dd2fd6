import pytest

from mpix.formats import LcgRandom
from mpix.qoi import QoiEncoder, qoi_encode

END = bytes(7) + b"\x01"


def _decode(data: bytes):
    assert data[:4] == b"qoif"
    width = int.from_bytes(data[4:8], "big")
    height = int.from_bytes(data[8:12], "big")
    assert data[12:14] == bytes((3, 0))
    assert data[-8:] == END
    pos, end = 14, len(data) - 8
    prev = (0, 0, 0)
    index = [(0, 0, 0)] * 64
    pixels = []
    while pos < end:
        op = data[pos]
        pos += 1
        if op == 0xFE:
            px = tuple(data[pos:pos + 3])
            pos += 3
        elif op >> 6 == 0:
            px = index[op]
        elif op >> 6 == 1:
            deltas = ((op >> 4 & 3) - 2, (op >> 2 & 3) - 2, (op & 3) - 2)
            px = tuple((p + d) & 0xFF for p, d in zip(prev, deltas))
        elif op >> 6 == 2:
            dg = (op & 0x3F) - 32
            second = data[pos]
            pos += 1
            deltas = (dg + (second >> 4) - 8, dg, dg + (second & 0x0F) - 8)
            px = tuple((p + d) & 0xFF for p, d in zip(prev, deltas))
        else:
            pixels.extend([prev] * ((op & 0x3F) + 1))
            continue
        index[(px[0] * 3 + px[1] * 5 + px[2] * 7 + 255 * 11) % 64] = px
        pixels.append(px)
        prev = px
    return width, height, pixels


def _pixels(buf: bytes):
    return list(zip(buf[0::3], buf[1::3], buf[2::3]))


def test_header_layout():
    assert QoiEncoder(640, 480).header() == (
        b"qoif" + (640).to_bytes(4, "big") + (480).to_bytes(4, "big") + b"\x03\x00"
    )


def test_single_black_pixel_is_one_run():
    out = qoi_encode(bytes(3), 1, 1)
    assert out == QoiEncoder(1, 1).header() + b"\xc0" + END


def test_round_trip_random():
    rng = LcgRandom(7)
    width, height = 9, 7
    buf = bytes(rng.next_u32() >> 24 for _ in range(width * height * 3))
    _, _, pixels = _decode(qoi_encode(buf, width, height))
    assert pixels == _pixels(buf)


def test_round_trip_repeated_colours_and_long_runs():
    width, height = 100, 2
    line = bytes((10, 20, 30)) * 70 + bytes((11, 19, 30)) * 30
    buf = line * height
    out = qoi_encode(buf, width, height)
    _, _, pixels = _decode(out)
    assert pixels == _pixels(buf)
    # Runs never exceed 62 pixels, so no run byte collides with the RGB opcodes
    assert 0xFF not in out[14:-8]


def test_encode_line_state_carries_between_lines():
    enc = QoiEncoder(2, 2)
    first = enc.encode_line(bytes((1, 2, 3)) * 2, is_first=True)
    second = enc.encode_line(bytes((1, 2, 3)) * 2, is_last=True)
    _, _, pixels = _decode(first + second)
    assert pixels == [(1, 2, 3)] * 4
    assert first.startswith(b"qoif")
    assert second.endswith(END)


def test_invalid_dimensions_and_short_buffer():
    with pytest.raises(ValueError):
        qoi_encode(b"", 0, 1)
    with pytest.raises(ValueError):
        qoi_encode(bytes(5), 2, 1)
    with pytest.raises(ValueError):
        QoiEncoder(0, 1).encode_line(b"")