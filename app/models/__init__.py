"""
Models package initialization
"""

from .profile import Profile
from .connection import Connection, canonical_pair
from .listing import Listing

__all__ = ["Profile", "Connection", "canonical_pair", "Listing"]
