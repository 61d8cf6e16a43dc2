#!/usr/bin/env python3
"""
Ether Dream DAC Package

This package contains the components for talking to an Ether Dream DAC,
organized leaf first: record types, the wire codec, discovery, the control
session and the streaming engine.
"""

# Re-export main components for easy importing
from .engine import DacEngine, EngineState
from .session import DacSession
from .types import Beacon, DacError, Point, Response

__all__ = ["DacEngine", "EngineState", "DacSession", "Beacon", "DacError", "Point", "Response"]
