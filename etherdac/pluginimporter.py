#!/usr/bin/env python3
''' find and load the modules that make up a plugin package '''

import importlib
import logging
import pkgutil
from types import ModuleType


def import_plugins(namespace: ModuleType) -> dict[str, ModuleType]:
    ''' import every module in a plugin package, keyed by full module name '''

    plugins: dict[str, ModuleType] = {}
    prefix = f'{namespace.__name__}.'
    for _, name, ispkg in pkgutil.iter_modules(namespace.__path__, prefix):
        if ispkg:
            continue
        try:
            plugins[name] = importlib.import_module(name)
        except ImportError as error:
            logging.error('Unable to load plugin %s: %s', name, error)
            continue
        if not hasattr(plugins[name], 'Plugin'):
            logging.debug('%s is not a plugin', name)
            del plugins[name]
    return plugins
