"""Domain enums — pure Python, no external dependencies."""

from enum import Enum


class ProductType(str, Enum):
    """Loan product types used by the collections desk.

    Officers and accounts carry the tag as a plain string so that new
    products can be introduced without a code change; this enum lists the
    ones the seeding tool knows about.
    """

    DIGITAL_LOANS = "Digital Loans"
    ASSET_FINANCE = "Asset Finance"
    CONSUMER_LOANS = "Consumer Loans"
    SME = "SME"
    CREDIT_CARDS = "Credit Cards"


class SkipReason(str, Enum):
    NO_OFFICERS = "no officers available"
    NO_CAPACITY = "no capacity"


class DriftKind(str, Enum):
    STALE_ROSTER_ENTRY = "stale_roster_entry"
    MISSING_ROSTER_ENTRY = "missing_roster_entry"
    UNKNOWN_OWNER = "unknown_owner"
