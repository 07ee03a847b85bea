#!/usr/bin/env python3
"""
Remote control for Frontier Silicon (FSAPI) internet radios
"""

__version__ = "0.1.0"
