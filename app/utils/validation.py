"""
Field validation helpers shared by request schemas.
Each returns the (possibly normalised) value or raises ValueError.
"""

import re
from typing import List, Optional

from app.schemas.enums import US_STATE_CODES

PHONE_PATTERN = re.compile(r"^\+[1-9]\d{1,14}$")
ZIP_PATTERN = re.compile(r"^\d{5}(-\d{4})?$")

MAX_LISTING_IMAGES = 10
MAX_LISTING_PRICE = 1_000_000


def check_phone(v: Optional[str]) -> Optional[str]:
    if v is not None and not PHONE_PATTERN.match(v):
        raise ValueError("Invalid phone number format (use E.164 format: +1234567890)")
    return v


def check_state_code(v: Optional[str]) -> Optional[str]:
    if v is None:
        return v
    v = v.strip().upper()
    if v not in US_STATE_CODES:
        raise ValueError("Invalid state code")
    return v


def check_zip_code(v: Optional[str]) -> Optional[str]:
    if v is not None and not ZIP_PATTERN.match(v):
        raise ValueError("Invalid ZIP code format")
    return v


def check_price(v: Optional[float]) -> Optional[float]:
    if v is not None and not 0 < v < MAX_LISTING_PRICE:
        raise ValueError("Price must be a positive number less than $1,000,000")
    return v


def check_images(v: Optional[List[str]]) -> Optional[List[str]]:
    if v is not None and len(v) > MAX_LISTING_IMAGES:
        raise ValueError(f"Maximum {MAX_LISTING_IMAGES} images allowed")
    return v
