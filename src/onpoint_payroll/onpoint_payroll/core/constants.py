"""Constants and defaults.

Note: Keep constants here to avoid magic numbers spread across code.
"""

from decimal import Decimal

# Working calendar defaults (per-tenant settings override these).
DEFAULT_WORKING_HOURS_PER_DAY = 8.0
DEFAULT_BREAK_DURATION_MINUTES = 60
DEFAULT_WORKING_WEEKDAYS = frozenset({0, 1, 2, 3, 4})  # Mon..Fri

# Single-session days at or above this length get the break deducted.
BREAK_THRESHOLD_HOURS = 7
# Legacy entries count only within working_hours_per_day +/- this window.
OK_ENTRY_TOLERANCE_MINUTES = 10

AUTO_CLOSE_HOUR = 22
AUTO_CLOSE_LOCATION = "Auto-closed at 22:00"

PAYSLIP_CACHE_TTL_SECONDS = 2 * 60 * 60

# SSNIT (Ghana social security)
SSNIT_EMPLOYEE_RATE = Decimal("0.055")
SSNIT_EMPLOYER_RATE = Decimal("0.13")
SSNIT_TIER1_RATE = Decimal("0.135")
SSNIT_TIER2_RATE = Decimal("0.05")
SSNIT_TIER_CEILING = Decimal("1500")

MONTHS_PER_YEAR = 12
CURRENCY_QUANT = Decimal("0.01")
