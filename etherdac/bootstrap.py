#!/usr/bin/env python3
"""bootstrap the app"""

import logging
import logging.handlers
import pathlib

from PySide6.QtCore import QCoreApplication, QStandardPaths  # pylint: disable=no-name-in-module


def set_qt_names(
    app: QCoreApplication | None = None,
    domain: str = "com.github.etherdac",
    appname: str = "etherdac",
):
    """bootstrap Qt for configuration"""
    if not app:
        app = QCoreApplication.instance()
    if not app:
        app = QCoreApplication()
    app.setOrganizationDomain(domain)
    app.setOrganizationName("etherdac")
    app.setApplicationName(appname)


def setuplogging(logdir: pathlib.Path | str | None = None, rotate: bool = False) -> pathlib.Path:
    """send everything to debug.log in logdir; rotate keeps the previous run as debug.log.1"""
    if logdir:
        logpath = pathlib.Path(logdir)
    else:
        logpath = pathlib.Path(
            QStandardPaths.standardLocations(QStandardPaths.DocumentsLocation)[0],
            QCoreApplication.applicationName(),
        ).joinpath("logs")
    logpath.mkdir(parents=True, exist_ok=True)
    logfile = logpath.joinpath("debug.log")

    logfhandler = logging.handlers.RotatingFileHandler(
        filename=logfile, backupCount=10, encoding="utf-8", delay=True
    )
    if rotate and logfile.exists():
        logfhandler.doRollover()

    logging.basicConfig(
        format="%(asctime)s %(levelname)s %(module)s:%(funcName)s:%(lineno)d %(message)s",
        datefmt="%Y-%m-%dT%H:%M:%S%z",
        handlers=[logfhandler],
        level=logging.DEBUG,
    )
    logging.captureWarnings(True)
    return logpath
