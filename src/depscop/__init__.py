"""Layered-architecture dependency checker for C# code bases."""

__version__ = "0.1.0"
