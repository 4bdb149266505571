"""Stereo console preamp channel strip with tape saturation, EQ, dynamics, filters and metering."""

__version__ = "0.1.0"

__all__ = [
    "cabs",
    "cli",
    "dither",
    "dynamics",
    "eq",
    "meters",
    "params",
    "processor",
    "state",
    "tapehack",
]