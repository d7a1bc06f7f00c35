#!/usr/bin/env python3
"""Techem wM-Bus - a decoder for Techem wireless meter frames."""

__version__ = "0.4.2"
VERSION = __version__
