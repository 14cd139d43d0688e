"""
Machine-readable error codes returned alongside error details.
"""

# Input validation
INVALID_INPUT = "INVALID_INPUT"
INVALID_DEGREE = "INVALID_DEGREE"
INVALID_PAGINATION = "INVALID_PAGINATION"
INVALID_IMAGE = "INVALID_IMAGE"
SELF_CONNECTION = "SELF_CONNECTION"

# Authentication / authorization
NOT_AUTHENTICATED = "NOT_AUTHENTICATED"
INVALID_TOKEN = "INVALID_TOKEN"
UNAUTHORIZED_ACCESS = "UNAUTHORIZED_ACCESS"
NOT_LISTING_OWNER = "NOT_LISTING_OWNER"

# Lookups
PROFILE_NOT_FOUND = "PROFILE_NOT_FOUND"
CONNECTION_NOT_FOUND = "CONNECTION_NOT_FOUND"
LISTING_NOT_FOUND = "LISTING_NOT_FOUND"
SHARED_LISTING_NOT_FOUND = "SHARED_LISTING_NOT_FOUND"

# Conflicts
PROFILE_EXISTS = "PROFILE_EXISTS"
CONNECTION_EXISTS = "CONNECTION_EXISTS"
DUPLICATE_CONNECTION = "DUPLICATE_CONNECTION"
CONNECTION_BLOCKED = "CONNECTION_BLOCKED"

# Collaborators
STORE_UNAVAILABLE = "STORE_UNAVAILABLE"
STORAGE_UNAVAILABLE = "STORAGE_UNAVAILABLE"

# Throttling
RATE_LIMITED = "RATE_LIMITED"
