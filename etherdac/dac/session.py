#!/usr/bin/env python3
"""
Ether Dream Session

One TCP connection to one DAC.  Every exchange is strictly request then
response; there is never more than one command in flight.  Transport errors
are converted into the DacError family here so callers only ever have to
handle that.
"""

import asyncio
import contextlib
import logging

from .protocol import (
    Command,
    decode_response,
    decode_version,
    encode_command,
    version,
)
from .types import (
    CONTROL_PORT,
    RESPONSE_SIZE,
    VERSION_SIZE,
    AsyncEmergencyStop,
    ConnectFailure,
    IOFailure,
    MalformedRecord,
    Opcode,
    ProtocolMismatch,
    Response,
    ResponseCode,
)


def _name(value: int, enumtype) -> str:
    try:
        return enumtype(value).name
    except ValueError:
        return f"0x{value:02x}"


class DacSession:
    """Owns the control connection to a DAC"""

    def __init__(
        self,
        reader: asyncio.StreamReader,
        writer: asyncio.StreamWriter,
        address: str,
        timeout: float | None = None,
    ):
        self.reader = reader
        self.writer = writer
        self.address = address
        self.timeout = timeout
        self.greeting: Response | None = None
        self.closed = False

    @classmethod
    async def open(
        cls,
        address: str,
        port: int = CONTROL_PORT,
        timeout: float | None = None,
        connect_timeout: float | None = None,
    ) -> "DacSession":
        """Connect and consume the status frame the DAC pushes on connect"""
        try:
            reader, writer = await asyncio.wait_for(
                asyncio.open_connection(address, port), connect_timeout
            )
        except (OSError, asyncio.TimeoutError) as err:
            raise ConnectFailure(f"unable to connect to {address}:{port}: {err!r}") from err

        session = cls(reader, writer, address, timeout=timeout)
        try:
            session.greeting = decode_response(await session._read(RESPONSE_SIZE))
        except Exception:
            await session.close()
            raise
        logging.info("Connected to DAC at %s:%d", address, port)
        return session

    async def __aenter__(self) -> "DacSession":
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb) -> None:
        await self.close()

    async def close(self) -> None:
        """Release the socket.  Safe to call more than once"""
        if self.closed:
            return
        self.closed = True
        self.writer.close()
        with contextlib.suppress(OSError, asyncio.TimeoutError):
            await asyncio.wait_for(self.writer.wait_closed(), 1.0)
        logging.debug("Closed session to %s", self.address)

    async def request(self, command: Command) -> Response:
        """Send a command and return its validated response"""
        if command.opcode == Opcode.VERSION:
            raise ValueError("version replies have no response envelope; use query_version")

        try:
            await self._send(command)
            response = decode_response(await self._read(RESPONSE_SIZE))
            self._validate(command, response)
        except Exception:
            await self.close()
            raise
        return response

    async def query_version(self) -> str:
        """Ask the DAC for its firmware version string"""
        try:
            await self._send(version())
            return decode_version(await self._read(VERSION_SIZE))
        except Exception:
            await self.close()
            raise

    @staticmethod
    def _validate(command: Command, response: Response) -> None:
        if response.command == Opcode.EMERGENCY_STOP and command.opcode != Opcode.EMERGENCY_STOP:
            raise AsyncEmergencyStop(
                f"DAC reported emergency stop while handling {command.opcode.name}",
                response,
            )

        if not response.acked:
            raise ProtocolMismatch(
                f"{command.opcode.name} answered with "
                f"{_name(response.response, ResponseCode)}",
                response,
            )

        if response.command != command.opcode:
            raise ProtocolMismatch(
                f"sent {command.opcode.name} but DAC echoed {_name(response.command, Opcode)}",
                response,
            )

    async def _send(self, command: Command) -> None:
        if self.closed:
            raise IOFailure(f"session to {self.address} is closed")
        data = encode_command(command)
        logging.debug("-> %s (%d bytes)", command, len(data))
        try:
            self.writer.write(data)
            await asyncio.wait_for(self.writer.drain(), self.timeout)
        except (OSError, asyncio.TimeoutError) as err:
            raise IOFailure(f"write of {command} failed: {err!r}") from err

    async def _read(self, size: int) -> bytes:
        if self.closed:
            raise IOFailure(f"session to {self.address} is closed")
        try:
            data = await asyncio.wait_for(self.reader.readexactly(size), self.timeout)
        except asyncio.IncompleteReadError as err:
            if err.partial:
                raise MalformedRecord(
                    f"connection closed after {len(err.partial)} of {size} bytes"
                ) from err
            raise IOFailure(f"connection to {self.address} closed") from err
        except asyncio.TimeoutError as err:
            raise IOFailure(f"no reply from {self.address} within {self.timeout}s") from err
        except OSError as err:
            raise IOFailure(f"read from {self.address} failed: {err!r}") from err
        logging.debug("<- %s", data.hex(" "))
        return data
