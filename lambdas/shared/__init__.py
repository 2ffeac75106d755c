"""Shared record model, configuration and storage for the LW roster."""

from .codec import decode, decode_one, encode, encode_one
from .config import Config, RosterOptions
from .db import RosterTable
from .exceptions import (
    BoundaryError,
    ConfigurationError,
    DecodeError,
    IndexOutOfRangeError,
    RosterError,
    RosterLoadError,
    StaleBufferError,
)
from .models import Character

__all__ = [
    # Codec
    "decode",
    "decode_one",
    "encode",
    "encode_one",
    # Config
    "Config",
    "RosterOptions",
    # Database
    "RosterTable",
    # Exceptions
    "BoundaryError",
    "ConfigurationError",
    "DecodeError",
    "IndexOutOfRangeError",
    "RosterError",
    "RosterLoadError",
    "StaleBufferError",
    # Models
    "Character",
]
