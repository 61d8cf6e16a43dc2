#!/usr/bin/env python3
"""
Ether Dream laser DAC client

Discovers a DAC on the local network and keeps it streaming points from a
point source plugin.
"""

from etherdac.version import __VERSION__ as __version__

__all__ = ["__version__"]
