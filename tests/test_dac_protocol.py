#!/usr/bin/env python3
"""Tests for the Ether Dream record codec and command encoder"""

import struct

import pytest

from etherdac.dac import protocol
from etherdac.dac.types import (
    MalformedRecord,
    Opcode,
    Point,
    ResponseCode,
)


@pytest.mark.parametrize(
    "point",
    [
        Point(),
        Point(x=-32768, y=32767, r=65535, g=0, b=1),
        Point(x=-1, y=-12345, r=1, g=2, b=3, i=4, u1=5, u2=6, control=0x8000),
        Point(x=32767, y=-32768, r=65535, g=65535, b=65535, i=65535, u1=65535, u2=65535),
    ],
)
def test_point_round_trip(point):
    """every field, including negative deflection, survives the wire"""
    data = protocol.encode_point(point)
    assert len(data) == 18
    assert protocol.decode_point(data) == point


def test_point_wire_layout():
    """control comes first, then signed x and y, then the colour channels"""
    data = protocol.encode_point(Point(x=-2, y=3, r=4, g=5, b=6, i=7, u1=8, u2=9, control=1))
    assert data == struct.pack("<HhhHHHHHH", 1, -2, 3, 4, 5, 6, 7, 8, 9)


def test_point_out_of_range():
    """values that do not fit are rejected instead of wrapped"""
    with pytest.raises(ValueError):
        protocol.encode_point(Point(x=40000))
    with pytest.raises(ValueError):
        protocol.encode_point(Point(r=-1))


def test_point_short():
    """a truncated point is malformed"""
    with pytest.raises(MalformedRecord):
        protocol.decode_point(bytes(17))


def test_response_literal():
    """decode a captured response field by field"""
    data = bytes.fromhex("61 64 01 02 03 04 0A00 0B00 0C00 0D00 64000000 E8030000")
    assert len(data) == 22

    response = protocol.decode_response(data)
    assert response.response == 0x61
    assert response.response == ResponseCode.ACK
    assert response.command == 0x64
    assert response.command == Opcode.WRITE_DATA
    assert response.protocol == 1
    assert response.light_engine_state == 2
    assert response.playback_state == 3
    assert response.source == 4
    assert response.light_engine_flags == 10
    assert response.playback_flags == 11
    assert response.source_flags == 12
    assert response.buffer_fullness == 13
    assert response.point_rate == 100
    assert response.point_count == 1000
    assert response.acked


def test_response_unsigned_fields():
    """high bits are not sign extended"""
    data = bytes([0x46, 0x3F, 0xFF, 0, 0, 0]) + b"\xff\xff" * 4 + b"\xff\xff\xff\xff" * 2
    response = protocol.decode_response(data)
    assert response.protocol == 255
    assert response.buffer_fullness == 65535
    assert response.point_count == 0xFFFFFFFF
    assert not response.acked


def test_response_encode_matches_decode():
    """the encoder used by the fake DAC produces what the decoder reads"""
    data = bytes.fromhex("61 64 01 02 03 04 0A00 0B00 0C00 0D00 64000000 E8030000")
    assert protocol.encode_response(protocol.decode_response(data)) == data


def test_response_short():
    """fewer than 22 bytes is malformed"""
    with pytest.raises(MalformedRecord):
        protocol.decode_response(bytes(21))


def test_response_trailing_bytes_ignored():
    """only the first 22 bytes make up the record"""
    data = bytes.fromhex("61 3F 00 00 00 00 0000 0000 0000 2C01 00000000 00000000") + b"junk"
    assert protocol.decode_response(data).buffer_fullness == 300


def test_beacon_decode():
    """header fields and the formatted mac address"""
    data = bytes([0x00, 0x04, 0xA3, 0x12, 0x34, 0x56]) + struct.pack("<HHHH", 2, 5, 1799, 30000)
    beacon = protocol.decode_beacon(data + bytes(20))
    assert beacon.mac_address == bytes([0x00, 0x04, 0xA3, 0x12, 0x34, 0x56])
    assert beacon.mac == "00:04:a3:12:34:56"
    assert beacon.hw_revision == 2
    assert beacon.sw_revision == 5
    assert beacon.buffer_capacity == 1799
    assert beacon.max_point_rate == 30000
    assert protocol.encode_beacon(beacon) == data


def test_beacon_short():
    """a beacon needs its full 14 byte header"""
    with pytest.raises(MalformedRecord):
        protocol.decode_beacon(bytes(13))


def test_version_decode():
    """NUL padding and whitespace are stripped"""
    assert protocol.decode_version(b"v1.2 build 7 \x00".ljust(32, b"\x00")) == "v1.2 build 7"
    assert protocol.decode_version(bytes(32)) == ""
    with pytest.raises(MalformedRecord):
        protocol.decode_version(b"short")


@pytest.mark.parametrize(
    "command,expected",
    [
        (protocol.ping(), b"?"),
        (protocol.version(), b"v"),
        (protocol.prepare_stream(), b"p"),
        (protocol.clear_emergency_stop(), b"c"),
        (protocol.stop(), b"s"),
        (protocol.emergency_stop(), b"\x00"),
        (protocol.emergency_stop(alternative=True), b"\xff"),
    ],
)
def test_no_payload_commands(command, expected):
    """commands without a payload are a single opcode byte"""
    assert protocol.encode_command(command) == expected


def test_begin_playback():
    """u16 low water mark then u32 rate"""
    data = protocol.encode_command(protocol.begin_playback(0, 24000))
    assert data == b"b" + struct.pack("<HI", 0, 24000)
    assert len(data) == 7


def test_queue_rate_change():
    """u32 rate"""
    data = protocol.encode_command(protocol.queue_rate_change(30000))
    assert data == b"q" + struct.pack("<I", 30000)


@pytest.mark.parametrize("length", [0, 1, 600, 1799])
def test_write_data_size(length):
    """opcode, u16 count, then 18 bytes per point"""
    points = [Point(x=index % 100, y=-index % 100) for index in range(length)]
    data = protocol.encode_command(protocol.write_data(points))
    assert len(data) == 1 + 2 + 18 * length
    assert data[0] == Opcode.WRITE_DATA
    assert struct.unpack_from("<H", data, 1)[0] == length


def test_write_data_points_in_order():
    """points follow the count in the order supplied"""
    points = [Point(x=1), Point(x=-2), Point(y=3)]
    data = protocol.encode_command(protocol.write_data(points))
    decoded = [protocol.decode_point(data[3 + 18 * index : 21 + 18 * index]) for index in range(3)]
    assert decoded == points


def test_write_data_too_long():
    """the count must fit in 16 bits"""
    with pytest.raises(ValueError):
        protocol.write_data([Point()] * 65536)


def test_command_is_immutable():
    """commands are values"""
    command = protocol.ping()
    with pytest.raises(AttributeError):
        command.opcode = Opcode.STOP  # type: ignore[misc]
    assert command == protocol.ping()


def test_command_str():
    """readable names for the debug log"""
    assert str(protocol.ping()) == "PING"
    assert str(protocol.write_data([Point()] * 3)) == "WRITE_DATA(3 points)"
    assert str(protocol.begin_playback(0, 100)) == "BEGIN_PLAYBACK(0, 100)"
