"""Hajari - claim network devices by name and track their presence."""

__version__ = "0.1.0"
