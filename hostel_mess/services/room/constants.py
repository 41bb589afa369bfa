"""
Seat ledger constants.
"""

from typing import Final

SUCCESS_SEAT_CREATED: Final[str] = "Seat created successfully"
SUCCESS_SEAT_STATUS_UPDATED: Final[str] = "Seat status updated successfully"
SUCCESS_SEAT_COUNTS_RECONCILED: Final[str] = "Seat counts reconciled"
SUCCESS_SEAT_TOTAL_UPDATED: Final[str] = "Seat total updated successfully"

MAX_SEAT_NUMBER_LENGTH: Final[int] = 20
