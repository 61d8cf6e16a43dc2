#!/usr/bin/env python3
"""
Ether Dream Protocol Handler

This module handles the low-level record layouts and command framing.  Nothing
in here touches a socket: the discovery listener and the session feed it bytes
and send what it builds.

Every multi-byte value on the wire is little-endian.
"""

import struct
from dataclasses import dataclass
from typing import Iterable

from .types import (
    BEACON_SIZE,
    MAX_FRAME_POINTS,
    POINT_SIZE,
    RESPONSE_SIZE,
    VERSION_SIZE,
    Beacon,
    MalformedRecord,
    Opcode,
    Point,
    Response,
)

# mac, hw rev, sw rev, buffer capacity, max point rate
BEACON_STRUCT = struct.Struct("<6sHHHH")

# response, command, then the 20 byte status block
RESPONSE_STRUCT = struct.Struct("<BBBBBBHHHHII")

# control, x, y, r, g, b, i, u1, u2
POINT_STRUCT = struct.Struct("<HhhHHHHHH")

# begin playback: low water mark, point rate
BEGIN_FORMAT = "HI"
# queue rate change: point rate
RATE_FORMAT = "I"


def _require(data: bytes, size: int, what: str) -> None:
    if len(data) < size:
        raise MalformedRecord(f"{what} needs {size} bytes, got {len(data)}")


def decode_beacon(data: bytes) -> Beacon:
    """Decode the fixed header at the start of a broadcast datagram"""
    _require(data, BEACON_SIZE, "beacon")
    mac, hw_rev, sw_rev, capacity, rate = BEACON_STRUCT.unpack_from(data)
    return Beacon(
        mac_address=mac,
        hw_revision=hw_rev,
        sw_revision=sw_rev,
        buffer_capacity=capacity,
        max_point_rate=rate,
    )


def encode_beacon(beacon: Beacon) -> bytes:
    """Build the header a DAC would broadcast"""
    return BEACON_STRUCT.pack(
        beacon.mac_address,
        beacon.hw_revision,
        beacon.sw_revision,
        beacon.buffer_capacity,
        beacon.max_point_rate,
    )


def decode_response(data: bytes) -> Response:
    """Decode a 22 byte response frame"""
    _require(data, RESPONSE_SIZE, "response")
    return Response(*RESPONSE_STRUCT.unpack_from(data))


def encode_response(response: Response) -> bytes:
    """Build a response frame the way the DAC sends it"""
    return RESPONSE_STRUCT.pack(
        response.response,
        response.command,
        response.protocol,
        response.light_engine_state,
        response.playback_state,
        response.source,
        response.light_engine_flags,
        response.playback_flags,
        response.source_flags,
        response.buffer_fullness,
        response.point_rate,
        response.point_count,
    )


def decode_version(data: bytes) -> str:
    """Version replies are 32 bytes of NUL padded text with no envelope"""
    _require(data, VERSION_SIZE, "version")
    return data[:VERSION_SIZE].split(b"\x00", 1)[0].decode("ascii", errors="replace").strip()


def encode_point(point: Point) -> bytes:
    """Pack a point into its 18 byte wire form"""
    try:
        return POINT_STRUCT.pack(
            point.control,
            point.x,
            point.y,
            point.r,
            point.g,
            point.b,
            point.i,
            point.u1,
            point.u2,
        )
    except struct.error as err:
        raise ValueError(f"point out of range: {point}") from err


def decode_point(data: bytes) -> Point:
    """Unpack an 18 byte point"""
    _require(data, POINT_SIZE, "point")
    control, x, y, r, g, b, i, u1, u2 = POINT_STRUCT.unpack_from(data)
    return Point(x=x, y=y, r=r, g=g, b=b, i=i, u1=u1, u2=u2, control=control)


@dataclass(frozen=True)
class NoPayload:
    """opcode byte only"""


@dataclass(frozen=True)
class ScalarPayload:
    """fixed list of integers packed with a struct format"""

    fmt: str
    values: tuple[int, ...]


@dataclass(frozen=True)
class PointsPayload:
    """u16 count followed by that many points"""

    points: tuple[Point, ...]


Payload = NoPayload | ScalarPayload | PointsPayload


@dataclass(frozen=True)
class Command:
    """an opcode and whatever it carries"""

    opcode: Opcode
    payload: Payload = NoPayload()

    def __str__(self) -> str:
        if isinstance(self.payload, PointsPayload):
            return f"{self.opcode.name}({len(self.payload.points)} points)"
        if isinstance(self.payload, ScalarPayload):
            return f"{self.opcode.name}{self.payload.values}"
        return self.opcode.name


def encode_command(command: Command) -> bytes:
    """Serialize a command: opcode byte, then its payload"""
    opcode = struct.pack("<B", command.opcode)
    payload = command.payload
    if isinstance(payload, NoPayload):
        return opcode
    if isinstance(payload, ScalarPayload):
        return opcode + struct.pack(f"<{payload.fmt}", *payload.values)
    if isinstance(payload, PointsPayload):
        return (
            opcode
            + struct.pack("<H", len(payload.points))
            + b"".join(encode_point(point) for point in payload.points)
        )
    raise TypeError(f"unknown payload {payload!r}")


def ping() -> Command:
    """ask for status without changing anything"""
    return Command(Opcode.PING)


def version() -> Command:
    """free text firmware version query"""
    return Command(Opcode.VERSION)


def prepare_stream() -> Command:
    """move playback from idle to prepared"""
    return Command(Opcode.PREPARE_STREAM)


def begin_playback(low_water_mark: int, point_rate: int) -> Command:
    """start emitting buffered points at point_rate"""
    return Command(Opcode.BEGIN_PLAYBACK, ScalarPayload(BEGIN_FORMAT, (low_water_mark, point_rate)))


def queue_rate_change(point_rate: int) -> Command:
    """queue a new rate, applied at the next point with the rate change bit set"""
    return Command(Opcode.QUEUE_RATE_CHANGE, ScalarPayload(RATE_FORMAT, (point_rate,)))


def write_data(points: Iterable[Point]) -> Command:
    """send a frame of points"""
    frame = tuple(points)
    if len(frame) > MAX_FRAME_POINTS:
        raise ValueError(f"frame of {len(frame)} points exceeds {MAX_FRAME_POINTS}")
    return Command(Opcode.WRITE_DATA, PointsPayload(frame))


def stop() -> Command:
    """stop playback and return to idle"""
    return Command(Opcode.STOP)


def emergency_stop(alternative: bool = False) -> Command:
    """put the light engine into the emergency stop state"""
    if alternative:
        return Command(Opcode.EMERGENCY_STOP_ALT)
    return Command(Opcode.EMERGENCY_STOP)


def clear_emergency_stop() -> Command:
    """leave the emergency stop state"""
    return Command(Opcode.CLEAR_EMERGENCY_STOP)
