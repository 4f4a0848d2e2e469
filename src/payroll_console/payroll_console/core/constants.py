"""Constants and defaults.

Note: Keep constants here to avoid magic numbers spread across code.
Business values are defaults for PayrollPolicy; services read the policy.
"""

from decimal import Decimal

DEFAULT_STANDARD_MONTHLY_HOURS = Decimal("160")
DEFAULT_OVERTIME_MULTIPLIER = Decimal("1.5")
DEFAULT_INTEGRITY_BONUS_AMOUNT = Decimal("1000")
DEFAULT_INTEGRITY_BONUS_THRESHOLD = Decimal("95")
DEFAULT_INTEGRITY_PENALTY_AMOUNT = Decimal("500")
DEFAULT_INTEGRITY_PENALTY_THRESHOLD = Decimal("75")
DEFAULT_ANNUAL_LEAVE_ALLOWANCE = 21

DEFAULT_INTEGRITY_SCORE = Decimal("100")
CURRENCY_QUANTUM = Decimal("0.01")

DEFAULT_CONNECT_TIMEOUT_SECONDS = 10
DEFAULT_READ_RETRY_ATTEMPTS = 3
DEFAULT_READ_RETRY_BACKOFF_SECONDS = 0.2
DEFAULT_LIST_LIMIT = 200
