"""Pairing-based proxy re-encryption with cloud server, data owner and data user parties."""

__version__ = "0.1.0"