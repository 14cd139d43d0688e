"""
Enumeration definitions for stored state fields and fixed options.
"""

from enum import Enum


class ConnectionStatus(str, Enum):
    PENDING = "pending"
    ACCEPTED = "accepted"
    BLOCKED = "blocked"

    @classmethod
    def list(cls):
        return [item.value for item in cls]


class ListingPermission(str, Enum):
    """Who may see a listing besides its owner."""
    PRIVATE = "private"      # owner's friend network
    LINK_ONLY = "link_only"  # holders of the share token
    PUBLIC = "public"        # anyone, including anonymous callers

    @classmethod
    def list(cls):
        return [item.value for item in cls]


class ListingType(str, Enum):
    APARTMENT = "apartment"
    ROOM = "room"
    LOOKING_FOR = "looking_for"

    @classmethod
    def list(cls):
        return [item.value for item in cls]


class PropertyType(str, Enum):
    STUDIO = "studio"
    ONE_BEDROOM = "1br"
    TWO_BEDROOM = "2br"
    THREE_BEDROOM = "3br"
    FOUR_PLUS_BEDROOM = "4br+"

    @classmethod
    def list(cls):
        return [item.value for item in cls]


class RelationshipState(str, Enum):
    """Connection state between the caller and another user."""
    NONE = "none"
    PENDING_SENT = "pending_sent"
    PENDING_RECEIVED = "pending_received"
    CONNECTED = "connected"
    BLOCKED = "blocked"


US_STATE_CODES = frozenset([
    'AL', 'AK', 'AZ', 'AR', 'CA', 'CO', 'CT', 'DE', 'FL', 'GA',
    'HI', 'ID', 'IL', 'IN', 'IA', 'KS', 'KY', 'LA', 'ME', 'MD',
    'MA', 'MI', 'MN', 'MS', 'MO', 'MT', 'NE', 'NV', 'NH', 'NJ',
    'NM', 'NY', 'NC', 'ND', 'OH', 'OK', 'OR', 'PA', 'RI', 'SC',
    'SD', 'TN', 'TX', 'UT', 'VT', 'VA', 'WA', 'WV', 'WI', 'WY',
    'DC', 'PR', 'VI', 'GU', 'AS', 'MP',
])
