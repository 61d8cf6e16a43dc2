#!/usr/bin/env python3
"""
Shared data types and constants for the Ether Dream protocol

This module contains the record dataclasses, opcode tables, and exceptions
used throughout the DAC implementation.
"""

import enum
from dataclasses import dataclass

# Protocol constants
DISCOVERY_PORT = 7654
CONTROL_PORT = 7765

BEACON_SIZE = 14
RESPONSE_SIZE = 22
POINT_SIZE = 18
VERSION_SIZE = 32

MAX_FRAME_POINTS = 0xFFFF


class Opcode(enum.IntEnum):
    """single byte that starts every command frame"""

    PREPARE_STREAM = 0x70  # p
    BEGIN_PLAYBACK = 0x62  # b
    QUEUE_RATE_CHANGE = 0x71  # q
    WRITE_DATA = 0x64  # d
    STOP = 0x73  # s
    EMERGENCY_STOP = 0x00
    EMERGENCY_STOP_ALT = 0xFF
    CLEAR_EMERGENCY_STOP = 0x63  # c
    PING = 0x3F  # ?
    VERSION = 0x76  # v


class ResponseCode(enum.IntEnum):
    """first byte of every response frame"""

    ACK = 0x61  # a
    NAK_FULL = 0x46  # F
    NAK_INVALID = 0x49  # I
    NAK_STOP_CONDITION = 0x21  # !


class LightEngineState(enum.IntEnum):
    """light engine state reported in the status block"""

    READY = 0
    WARMUP = 1
    COOLDOWN = 2
    EMERGENCY_STOP = 3


class PlaybackState(enum.IntEnum):
    """playback state reported in the status block"""

    IDLE = 0
    PREPARED = 1
    PLAYING = 2


@dataclass(frozen=True)
class Beacon:
    """Advertisement broadcast by a DAC"""

    mac_address: bytes
    hw_revision: int
    sw_revision: int
    buffer_capacity: int
    max_point_rate: int

    @property
    def mac(self) -> str:
        """mac address as aa:bb:cc:dd:ee:ff"""
        return ":".join(f"{octet:02x}" for octet in self.mac_address)


@dataclass(frozen=True)
class Response:
    """Acknowledgement plus the DAC status block"""

    response: int
    command: int
    protocol: int
    light_engine_state: int
    playback_state: int
    source: int
    light_engine_flags: int
    playback_flags: int
    source_flags: int
    buffer_fullness: int
    point_rate: int
    point_count: int

    @property
    def acked(self) -> bool:
        """did the DAC accept the command"""
        return self.response == ResponseCode.ACK


@dataclass(frozen=True)
class Point:
    """one sample sent to the DAC"""

    x: int = 0
    y: int = 0
    r: int = 0
    g: int = 0
    b: int = 0
    i: int = 0
    u1: int = 0
    u2: int = 0
    control: int = 0


class DacError(Exception):
    """Base exception for DAC protocol errors"""


class DiscoveryFailure(DacError):
    """no beacon could be received"""


class ConnectFailure(DacError):
    """the control port could not be reached"""


class MalformedRecord(DacError):
    """a record was shorter than its fixed length"""


class IOFailure(DacError):
    """transport level failure on an open session"""


class ProtocolMismatch(DacError):
    """the DAC rejected a command or echoed the wrong one"""

    def __init__(self, message: str, response: Response | None = None):
        super().__init__(message)
        self.response = response


class AsyncEmergencyStop(DacError):
    """the DAC reported an emergency stop outside the request cycle"""

    def __init__(self, message: str, response: Response | None = None):
        super().__init__(message)
        self.response = response


class InvalidFrame(DacError):
    """the point source produced a point that cannot be put on the wire"""
