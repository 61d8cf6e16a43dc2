#!/usr/bin/env python3
"""keep the DAC fed without drawing anything"""

from typing import TYPE_CHECKING

from etherdac.dac.types import Point
from etherdac.pointsources import PointSourcePlugin

if TYPE_CHECKING:
    from PySide6.QtCore import QSettings  # pylint: disable=no-name-in-module

    import etherdac.config


class Plugin(PointSourcePlugin):
    """dark points parked at the centre"""

    def __init__(
        self,
        config: "etherdac.config.ConfigFile | None" = None,
        qsettings: "QSettings | None" = None,
    ):
        super().__init__(config=config, qsettings=qsettings)
        self.displayname = "Blank"

    def defaults(self, qsettings: "QSettings"):
        qsettings.setValue("blank/points", 100)

    def next_frame(self, max_len: int) -> list[Point]:
        count = min(self.setting("blank/points", 100, int), max_len)
        return [Point()] * max(count, 0)
