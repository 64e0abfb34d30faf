"""Sector-based block devices, a small file system, PC device models and tools."""

__version__ = "0.1.0"