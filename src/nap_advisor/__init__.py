"""Nap advisory server for a single Oura ring wearer."""

__version__ = "1.0.0"
