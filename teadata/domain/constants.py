"""Domain business rules and constants."""

from datetime import timedelta
from typing import Final

# Business Rules - Core domain constraints
MAX_STEEP_TIME: Final = timedelta(minutes=30)
MIN_STEEP_TIME: Final = timedelta(seconds=1)
DEFAULT_STEEP_TIME: Final = timedelta(minutes=2)

BOILING_POINT_F: Final = 212
FREEZING_POINT_F: Final = 32
DEFAULT_BREW_TEMP: Final = BOILING_POINT_F

# Seed row written into a fresh store
DEFAULT_TEA_NAME: Final = "Earl Grey"

# .NET TimeSpan ticks are 100ns, the unit of the Steeptime column
TICKS_PER_MICROSECOND: Final = 10
