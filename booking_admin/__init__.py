"""Blocked-date calendar and audit trail backend for the booking admin console."""

__version__ = "0.1.0"
