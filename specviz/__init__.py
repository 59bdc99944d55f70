"""Spectral dataset viewer: file formats, dataset model and plot helpers.

This package holds the non-UI logic so it can be imported and tested without
Qt. The viewer itself lives in ``specviz_qt``.
"""

from __future__ import annotations
