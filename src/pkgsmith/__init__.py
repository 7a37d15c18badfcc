"""pkgsmith - plugin-driven Julia package scaffolding."""

__version__ = "0.1.0"
