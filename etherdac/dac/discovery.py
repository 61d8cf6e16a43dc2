#!/usr/bin/env python3
"""
Ether Dream Discovery Listener

DACs broadcast a beacon roughly once a second.  This module waits for exactly
one of them and reports who sent it.  No state is kept between calls; the
engine simply calls again when it needs another device.
"""

import asyncio
import logging

from .protocol import decode_beacon
from .types import DISCOVERY_PORT, Beacon, DiscoveryFailure


class BeaconProtocol(asyncio.DatagramProtocol):
    """Protocol class for UDP discovery"""

    def __init__(self, future: asyncio.Future):
        self.future = future

    def datagram_received(self, data: bytes, addr: tuple[str, int]) -> None:
        if not self.future.done():
            self.future.set_result((data, addr))

    def error_received(self, exc: Exception) -> None:
        if not self.future.done():
            self.future.set_exception(exc)

    def connection_lost(self, exc: Exception | None) -> None:
        if exc and not self.future.done():
            self.future.set_exception(exc)


async def _bind(loop: asyncio.AbstractEventLoop, future: asyncio.Future, host: str, port: int):
    try:
        return await loop.create_datagram_endpoint(
            lambda: BeaconProtocol(future),
            local_addr=(host, port),
            reuse_port=True,
        )
    except (OSError, ValueError):
        # reuse_port is not available everywhere
        return await loop.create_datagram_endpoint(
            lambda: BeaconProtocol(future), local_addr=(host, port)
        )


async def listen_for_beacon(
    port: int = DISCOVERY_PORT, timeout: float | None = None, host: str = "0.0.0.0"
) -> tuple[Beacon, str]:
    """Block until one beacon arrives and return it with the sender's address"""
    loop = asyncio.get_running_loop()
    future: asyncio.Future = loop.create_future()

    try:
        transport, _protocol = await _bind(loop, future, host, port)
    except OSError as err:
        raise DiscoveryFailure(f"unable to listen on {host}:{port}: {err}") from err

    try:
        data, addr = await asyncio.wait_for(future, timeout)
    except asyncio.TimeoutError as err:
        raise DiscoveryFailure(f"no beacon on port {port} within {timeout}s") from err
    except OSError as err:
        raise DiscoveryFailure(f"discovery receive failed: {err}") from err
    finally:
        transport.close()

    beacon = decode_beacon(data)
    logging.debug("Beacon from %s: %s", addr[0], data.hex(" "))
    logging.info(
        "Found DAC %s at %s (hw %d, sw %d, %d points, %d pps)",
        beacon.mac,
        addr[0],
        beacon.hw_revision,
        beacon.sw_revision,
        beacon.buffer_capacity,
        beacon.max_point_rate,
    )
    return beacon, addr[0]
