"""Request handlers for the HTTP API."""

from .ui import UIHandler

__all__ = ["UIHandler"]
