"""
Data models for DAT reading and writing.

This module contains pure data classes with no parsing logic.
"""

from .options import DEFAULT_OPTIONS, DatFileOptions, EmptyField
from .record import DatRecord

__all__ = ['DatFileOptions', 'DEFAULT_OPTIONS', 'EmptyField', 'DatRecord']
