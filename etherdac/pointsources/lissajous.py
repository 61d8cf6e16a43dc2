#!/usr/bin/env python3
"""a Lissajous figure that drifts over time"""

import math
import time
from typing import TYPE_CHECKING

from etherdac.dac.types import Point
from etherdac.pointsources import COLOR_MAX, XY_MAX, PointSourcePlugin, clamp_color, clamp_xy

if TYPE_CHECKING:
    from PySide6.QtCore import QSettings  # pylint: disable=no-name-in-module

    import etherdac.config


class Plugin(PointSourcePlugin):
    """x = sin(a*t + phase), y = sin(b*t), with phase advancing in real time"""

    def __init__(
        self,
        config: "etherdac.config.ConfigFile | None" = None,
        qsettings: "QSettings | None" = None,
    ):
        super().__init__(config=config, qsettings=qsettings)
        self.displayname = "Lissajous"
        self.started = time.monotonic()

    def defaults(self, qsettings: "QSettings"):
        qsettings.setValue("lissajous/points", 400)
        qsettings.setValue("lissajous/a", 3)
        qsettings.setValue("lissajous/b", 2)
        qsettings.setValue("lissajous/speed", 0.5)

    def phase(self) -> float:
        """radians of drift since the plugin was created"""
        speed = self.setting("lissajous/speed", 0.5, float)
        return (time.monotonic() - self.started) * speed

    def next_frame(self, max_len: int) -> list[Point]:
        count = min(self.setting("lissajous/points", 400, int), max_len)
        if count <= 0:
            return []
        freq_a = self.setting("lissajous/a", 3, int)
        freq_b = self.setting("lissajous/b", 2, int)
        phase = self.phase()
        frame = []
        for index in range(count):
            param = 2 * math.pi * index / count
            # fade the colour around the figure so the shape reads clearly
            hue = (math.sin(param) + 1) / 2
            frame.append(
                Point(
                    x=clamp_xy(XY_MAX * math.sin(freq_a * param + phase)),
                    y=clamp_xy(XY_MAX * math.sin(freq_b * param)),
                    r=clamp_color(COLOR_MAX * hue),
                    g=clamp_color(COLOR_MAX * (1 - hue)),
                    b=COLOR_MAX,
                )
            )
        return frame
