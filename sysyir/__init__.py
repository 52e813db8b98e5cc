"""Arenas, list cursors, and the types, values and globals of a SysY compiler IR."""

__version__ = "0.1.0"