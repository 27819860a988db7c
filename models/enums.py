"""
Centralized Enum definitions for the project.
"""

from enum import Enum


class OrderStatus(str, Enum):
    """Lifecycle states of a marketplace order"""

    PENDING = "pending"
    PROCESSING = "processing"
    COMPLETED = "completed"
    CANCELLED = "cancelled"
    REFUNDED = "refunded"


class RevenuePeriod(str, Enum):
    """Symbolic reporting periods for seller revenue analytics"""

    LAST_7_DAYS = "7d"
    LAST_30_DAYS = "30d"
    LAST_90_DAYS = "90d"
    YEAR_TO_DATE = "ytd"
    LAST_YEAR = "1y"  # Rolling 365 days


class BucketWidth(str, Enum):
    """Time slice used to group revenue in a trend series"""

    DAY = "day"
    WEEK = "week"
