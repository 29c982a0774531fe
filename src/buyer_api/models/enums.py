"""Closed enumerations for buyer categorical fields.

Values are case-sensitive and double as the wire and storage representation.
"""

import enum


class City(enum.StrEnum):
    CHANDIGARH = "Chandigarh"
    MOHALI = "Mohali"
    ZIRAKPUR = "Zirakpur"
    PANCHKULA = "Panchkula"
    OTHER = "Other"


class PropertyType(enum.StrEnum):
    APARTMENT = "Apartment"
    VILLA = "Villa"
    PLOT = "Plot"
    OFFICE = "Office"
    RETAIL = "Retail"


class BHK(enum.StrEnum):
    ONE = "ONE"
    TWO = "TWO"
    THREE = "THREE"
    FOUR = "FOUR"
    STUDIO = "STUDIO"


class Purpose(enum.StrEnum):
    BUY = "Buy"
    RENT = "Rent"


class Timeline(enum.StrEnum):
    ZERO_TO_3M = "ZERO_TO_3M"
    THREE_TO_6M = "THREE_TO_6M"
    GT_6M = "GT_6M"
    EXPLORING = "EXPLORING"


class Source(enum.StrEnum):
    WEBSITE = "Website"
    REFERRAL = "Referral"
    WALK_IN = "WALK_IN"
    CALL = "Call"
    OTHER = "Other"


class Status(enum.StrEnum):
    NEW = "New"
    QUALIFIED = "Qualified"
    CONTACTED = "Contacted"
    VISITED = "Visited"
    NEGOTIATION = "Negotiation"
    CONVERTED = "Converted"
    DROPPED = "Dropped"


# Property types for which a bedroom configuration is mandatory
UNIT_PROPERTY_TYPES = frozenset({PropertyType.APARTMENT, PropertyType.VILLA})
