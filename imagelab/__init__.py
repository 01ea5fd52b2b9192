"""
imagelab: in-memory raster image editing engine.

Images live in a named store; filters are addressed by command name and
positional arguments, e.g. ``blur koala koala-blur split 50``.
"""

__version__ = "1.0.0"
