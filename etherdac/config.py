#!/usr/bin/env python3
"""
config file parsing/handling
"""

import contextlib
import logging
import pathlib
import sys
from types import ModuleType

from PySide6.QtCore import (  # pylint: disable=no-name-in-module
    QCoreApplication,
    QSettings,
    QStandardPaths,
)

import etherdac.pluginimporter
import etherdac.pointsources
import etherdac.version
from etherdac.dac.types import CONTROL_PORT, DISCOVERY_PORT, MAX_FRAME_POINTS


class ConfigFile:  # pylint: disable=too-many-instance-attributes
    """read and write to config.ini"""

    def __init__(
        self,
        logpath: str | pathlib.Path | None = None,
        reset: bool = False,
        testmode: bool = False,
    ):
        self.version: str = etherdac.version.__VERSION__
        self.testmode: bool = testmode
        self.basedir: pathlib.Path = pathlib.Path(
            QStandardPaths.standardLocations(QStandardPaths.DocumentsLocation)[0],
            QCoreApplication.applicationName(),
        )
        self.logpath: pathlib.Path = self.basedir.joinpath("logs", "debug.log")
        if logpath:
            self.logpath = pathlib.Path(logpath)

        logging.info("Logpath: %s", self.logpath)

        self.qsettingsformat: QSettings.Format = QSettings.NativeFormat
        if sys.platform == "win32":
            self.qsettingsformat = QSettings.IniFormat

        self.cparser: QSettings = QSettings(
            self.qsettingsformat,
            QSettings.UserScope,
            QCoreApplication.organizationName(),
            QCoreApplication.applicationName(),
        )
        logging.info("configuration: %s", self.cparser.fileName())
        self.loglevel: str = "DEBUG"

        self.plugins: dict[str, dict[str, ModuleType]] = {}
        self.pluginobjs: dict[str, dict[str, etherdac.pointsources.PointSourcePlugin]] = {}

        self._force_set_statics()
        self._initial_plugins()
        self.defaults()
        if reset:
            self.cparser.clear()
            self._force_set_statics()
            self.save()
        else:
            self.get()

    def _force_set_statics(self) -> None:
        """make sure these are always set"""
        if self.testmode:
            self.cparser.setValue("testmode/enabled", True)

    def reset(self) -> None:
        """forcibly go back to defaults"""
        logging.debug("config reset")
        self.__init__(logpath=self.logpath, reset=True, testmode=self.testmode)  # pylint: disable=unnecessary-dunder-call

    def get(self) -> None:
        """refresh values"""
        self.cparser.sync()
        with contextlib.suppress(TypeError):
            self.loglevel = self.cparser.value("settings/loglevel", defaultValue=self.loglevel)

    def save(self) -> None:
        """save the current set"""
        self.cparser.setValue("settings/loglevel", self.loglevel)
        self.cparser.sync()

    def defaults(self) -> None:
        """default values for things"""
        logging.debug("set defaults")

        settings = QSettings(
            self.qsettingsformat,
            QSettings.SystemScope,
            QCoreApplication.organizationName(),
            QCoreApplication.applicationName(),
        )

        self._defaults_general_settings(settings)
        self._defaults_dac(settings)
        self._defaults_plugins(settings)

    def _initial_plugins(self) -> None:
        self.plugins["pointsources"] = etherdac.pluginimporter.import_plugins(
            etherdac.pointsources
        )
        self.pluginobjs["pointsources"] = {}

    def _defaults_general_settings(self, settings: QSettings) -> None:
        """default values for general settings"""
        settings.setValue("settings/loglevel", self.loglevel)
        settings.setValue("pointsource/plugin", "circle")

    @staticmethod
    def _defaults_dac(settings: QSettings) -> None:
        """default values for talking to the DAC"""
        settings.setValue("dac/discoveryport", DISCOVERY_PORT)
        settings.setValue("dac/controlport", CONTROL_PORT)
        settings.setValue("dac/discoverytimeout", 10.0)
        settings.setValue("dac/connecttimeout", 5.0)
        settings.setValue("dac/readtimeout", 2.0)
        settings.setValue("dac/pingdelay", 0.0)
        settings.setValue("dac/maxframe", MAX_FRAME_POINTS)
        settings.setValue("dac/pointrate", 0)

    def _defaults_plugins(self, settings: QSettings) -> None:
        """configure the defaults for plugins"""
        self.pluginobjs = {}
        for plugintype, plugtypelist in self.plugins.items():
            self.pluginobjs[plugintype] = {}
            removelist = []
            for key in plugtypelist:
                self.pluginobjs[plugintype][key] = self.plugins[plugintype][key].Plugin(
                    config=self, qsettings=settings
                )
                if self.testmode or self.pluginobjs[plugintype][key].available:
                    self.pluginobjs[plugintype][key].defaults(settings)
                else:
                    removelist.append(key)
            for key in removelist:
                del self.pluginobjs[plugintype][key]
                del self.plugins[plugintype][key]

    def validate_pointsource(self, plugin: str) -> ModuleType | None:
        """verify the point source name"""
        return self.plugins["pointsources"].get(f"etherdac.pointsources.{plugin}")

    def pointsource(self) -> etherdac.pointsources.PointSourcePlugin:
        """the configured point source, falling back to circle"""
        name = self.cparser.value("pointsource/plugin", defaultValue="circle")
        if not self.validate_pointsource(name):
            logging.error("Unknown point source %s, using circle", name)
            name = "circle"
        return self.pluginobjs["pointsources"][f"etherdac.pointsources.{name}"]
