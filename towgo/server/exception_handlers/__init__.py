"""
Exception handlers for the TowGo API server.

Domain and integration errors are mapped to their HTTP status; anything else
is logged with an error id and answered with a generic 500.
"""

from .global_handler import setup_exception_handlers

__all__ = ["setup_exception_handlers"]
