#!/usr/bin/env python3
"""
Ether Dream Streaming Engine

Drives a DAC from discovery to steady state streaming:

    DISCOVERING -> INITIALIZING -> STREAMING

Any DacError in any state throws away the session and everything learned from
it and starts over at DISCOVERING.  Flow control is ping based: every cycle
asks the DAC how full its buffer is and only sends the next frame when it
will fit.
"""

import asyncio
import enum
import logging
from typing import TYPE_CHECKING

from . import protocol
from .discovery import listen_for_beacon
from .session import DacSession
from .types import (
    CONTROL_PORT,
    DISCOVERY_PORT,
    MAX_FRAME_POINTS,
    Beacon,
    DacError,
    InvalidFrame,
    LightEngineState,
    Point,
)

if TYPE_CHECKING:
    import etherdac.config
    import etherdac.pointsources


class EngineState(enum.Enum):
    """where the engine is in its lifecycle"""

    DISCOVERING = "discovering"
    INITIALIZING = "initializing"
    STREAMING = "streaming"


def has_room(fullness: int, capacity: int, frame_length: int) -> bool:
    """will a frame of frame_length fit on top of what the DAC has queued"""
    return fullness < capacity - frame_length


class DacEngine:  # pylint: disable=too-many-instance-attributes
    """Keeps one DAC fed from a point source"""

    def __init__(
        self,
        config: "etherdac.config.ConfigFile | None" = None,
        pointsource: "etherdac.pointsources.PointSourcePlugin | None" = None,
    ):
        self.config = config
        if pointsource is None and config:
            pointsource = config.pointsource()
        if pointsource is None:
            raise ValueError("DacEngine needs a point source")
        self.pointsource = pointsource

        self.state = EngineState.DISCOVERING
        self.session: DacSession | None = None
        self.beacon: Beacon | None = None
        self.address: str | None = None
        self.light_engine_state: int | None = None
        self.next_frame: list[Point] | None = None

        self.restarts = 0
        self.frames_sent = 0

    def _value(self, key: str, default, valuetype):
        if not self.config:
            return default
        return self.config.cparser.value(key, type=valuetype, defaultValue=default)

    def _timeout(self, key: str, default: float) -> float | None:
        """0 means wait forever"""
        return self._value(key, default, float) or None

    @property
    def max_frame(self) -> int:
        """largest frame the point source may hand us for this DAC"""
        limit = min(self._value("dac/maxframe", MAX_FRAME_POINTS, int), MAX_FRAME_POINTS)
        if self.beacon:
            limit = min(limit, self.beacon.buffer_capacity - 1)
        return max(limit, 0)

    @property
    def point_rate(self) -> int:
        """playback rate: the DAC's maximum unless configured lower"""
        rate = self.beacon.max_point_rate if self.beacon else 0
        configured = self._value("dac/pointrate", 0, int)
        if configured > 0:
            rate = min(rate, configured) if rate else configured
        return rate

    def _transition(self, state: EngineState) -> None:
        if state != self.state:
            logging.info("DAC engine %s -> %s", self.state.value, state.value)
        self.state = state

    async def run(self) -> None:
        """step forever; cancel the task to stop"""
        logging.info("Starting DAC engine")
        try:
            while True:
                await self.step()
        finally:
            await self._close_session()
            logging.info("Stopped DAC engine")

    async def step(self) -> None:
        """perform the action for the current state once"""
        try:
            if self.state == EngineState.DISCOVERING:
                await self._discover()
            elif self.state == EngineState.INITIALIZING:
                await self._initialize()
            else:
                await self._stream()
        except DacError as err:
            logging.warning("DAC %s failed, rediscovering: %s", self.state.value, err)
            await self.restart()

    async def restart(self) -> None:
        """drop everything tied to the current device and go back to discovery"""
        self.restarts += 1
        await self._close_session()
        self.beacon = None
        self.address = None
        self.light_engine_state = None
        self.next_frame = None
        self._transition(EngineState.DISCOVERING)

    async def _close_session(self) -> None:
        session, self.session = self.session, None
        if session:
            await session.close()

    async def _discover(self) -> None:
        await self._close_session()
        beacon, address = await listen_for_beacon(
            port=self._value("dac/discoveryport", DISCOVERY_PORT, int),
            timeout=self._timeout("dac/discoverytimeout", 10.0),
        )
        self.session = await DacSession.open(
            address,
            port=self._value("dac/controlport", CONTROL_PORT, int),
            timeout=self._timeout("dac/readtimeout", 2.0),
            connect_timeout=self._timeout("dac/connecttimeout", 5.0),
        )
        self.beacon = beacon
        self.address = address
        self._transition(EngineState.INITIALIZING)

    async def _initialize(self) -> None:
        session = self._require_session()

        response = await session.request(protocol.ping())
        self.light_engine_state = response.light_engine_state

        logging.info("DAC firmware: %s", await session.query_version())

        if self.light_engine_state == LightEngineState.EMERGENCY_STOP:
            logging.info("Clearing emergency stop on %s", self.address)
            await session.request(protocol.clear_emergency_stop())

        await session.request(protocol.prepare_stream())

        await self._write(session, self._pull_frame())
        self.next_frame = self._pull_frame()

        rate = self.point_rate
        await session.request(protocol.begin_playback(0, rate))
        logging.info("Playback started at %d points/sec", rate)
        self._transition(EngineState.STREAMING)

    async def _stream(self) -> None:
        session = self._require_session()
        response = await session.request(protocol.ping())

        if self.next_frame is None:
            self.next_frame = self._pull_frame()

        if has_room(response.buffer_fullness, self.beacon.buffer_capacity, len(self.next_frame)):
            await self._write(session, self.next_frame)
            self.next_frame = self._pull_frame()
        else:
            logging.debug(
                "Buffer at %d/%d, holding %d points",
                response.buffer_fullness,
                self.beacon.buffer_capacity,
                len(self.next_frame),
            )

        if delay := self._value("dac/pingdelay", 0.0, float):
            await asyncio.sleep(delay)

    async def _write(self, session: DacSession, frame: list[Point]) -> None:
        await session.request(protocol.write_data(frame))
        self.frames_sent += 1

    def _pull_frame(self) -> list[Point]:
        limit = self.max_frame
        frame = list(self.pointsource.next_frame(limit))
        if len(frame) > limit:
            logging.debug("Point source returned %d points, truncating to %d", len(frame), limit)
            frame = frame[:limit]
        for point in frame:
            try:
                protocol.encode_point(point)
            except ValueError as err:
                raise InvalidFrame(f"point source {err}") from err
        return frame

    def _require_session(self) -> DacSession:
        if not self.session or not self.beacon:
            # only reachable if state was changed by hand
            raise DacError(f"no session while {self.state.value}")
        return self.session
