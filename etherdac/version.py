#!/usr/bin/env python3
''' version of this package '''

__VERSION__ = "1.0.0"
