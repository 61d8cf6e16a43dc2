#!/usr/bin/env python3
"""a plain white circle"""

import math
from typing import TYPE_CHECKING

from etherdac.dac.types import Point
from etherdac.pointsources import COLOR_MAX, XY_MAX, PointSourcePlugin, clamp_xy

if TYPE_CHECKING:
    from PySide6.QtCore import QSettings  # pylint: disable=no-name-in-module

    import etherdac.config


class Plugin(PointSourcePlugin):
    """draw the same circle every frame"""

    def __init__(
        self,
        config: "etherdac.config.ConfigFile | None" = None,
        qsettings: "QSettings | None" = None,
    ):
        super().__init__(config=config, qsettings=qsettings)
        self.displayname = "Circle"

    def defaults(self, qsettings: "QSettings"):
        qsettings.setValue("circle/points", 300)
        qsettings.setValue("circle/radius", 0.5)

    def next_frame(self, max_len: int) -> list[Point]:
        count = min(self.setting("circle/points", 300, int), max_len)
        if count <= 0:
            return []
        radius = self.setting("circle/radius", 0.5, float) * XY_MAX
        frame = []
        for index in range(count):
            angle = 2 * math.pi * index / count
            frame.append(
                Point(
                    x=clamp_xy(radius * math.cos(angle)),
                    y=clamp_xy(radius * math.sin(angle)),
                    r=COLOR_MAX,
                    g=COLOR_MAX,
                    b=COLOR_MAX,
                )
            )
        return frame
