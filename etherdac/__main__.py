#!/usr/bin/env python3
''' etherdac as run via python -m '''

import asyncio
import logging
import platform
import sys

from PySide6.QtCore import QCoreApplication  # pylint: disable=import-error, no-name-in-module

import etherdac
import etherdac.bootstrap
import etherdac.config
from etherdac.dac.engine import DacEngine


def run_bootstrap():  # pragma: no cover
    ''' bootstrap the app '''
    logpath = etherdac.bootstrap.setuplogging(rotate=True)
    plat = platform.platform()
    logging.info('starting up v%s on %s', etherdac.__version__, plat)
    return logpath


def main():  # pragma: no cover
    ''' main entrypoint '''
    qapp = QCoreApplication(sys.argv)  # pylint: disable=unused-variable
    etherdac.bootstrap.set_qt_names()
    logpath = run_bootstrap()

    config = etherdac.config.ConfigFile(logpath=logpath)
    logging.getLogger().setLevel(config.loglevel)

    engine = DacEngine(config=config)
    try:
        asyncio.run(engine.run())
    except KeyboardInterrupt:
        logging.info('interrupted')
    logging.info('shutting main down v%s', config.version)


if __name__ == '__main__':
    main()
