#!/usr/bin/env python3
"""Point Source Plugin definition"""

from typing import TYPE_CHECKING

from etherdac.dac.types import Point
from etherdac.plugin import EDBasePlugin

if TYPE_CHECKING:
    from PySide6.QtCore import QSettings  # pylint: disable=no-name-in-module

    import etherdac.config

# full scale deflection and colour
XY_MAX = 32767
COLOR_MAX = 65535


def clamp_xy(value: float) -> int:
    """scale overflow pins to the edge of the field"""
    return max(-XY_MAX, min(XY_MAX, int(value)))


def clamp_color(value: float) -> int:
    """channel value within 0..COLOR_MAX"""
    return max(0, min(COLOR_MAX, int(value)))


class PointSourcePlugin(EDBasePlugin):
    """base class of point source plugins"""

    def __init__(
        self,
        config: "etherdac.config.ConfigFile | None" = None,
        qsettings: "QSettings | None" = None,
    ):
        super().__init__(config=config, qsettings=qsettings)
        self.plugintype: str = "pointsource"

    def next_frame(self, max_len: int) -> list[Point]:
        """Return the next frame, at most max_len points long"""
        raise NotImplementedError
