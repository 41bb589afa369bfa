"""
Hostel and membership service constants.
"""

import re
from typing import Final

SHORT_CODE_PATTERN: Final = re.compile(r"^[A-Z0-9]{2,10}$")
MIN_HOSTEL_NAME_LENGTH: Final[int] = 2
MIN_TOTAL_SEATS: Final[int] = 1

# Success messages
SUCCESS_HOSTEL_CREATED: Final[str] = "Hostel created successfully"
SUCCESS_RULE_ADDED: Final[str] = "Rule added successfully"
SUCCESS_MEAL_WEIGHTS_UPDATED: Final[str] = "Meal weights updated successfully"
SUCCESS_SERVICE_SUSPENDED: Final[str] = "Hostel service suspended"
SUCCESS_SERVICE_RESUMED: Final[str] = "Hostel service resumed"
SUCCESS_FINE_ISSUED: Final[str] = "Fine issued successfully"
SUCCESS_JOINED_HOSTEL: Final[str] = "Joined hostel successfully"
SUCCESS_LEFT_HOSTEL: Final[str] = "Leaving date recorded"
SUCCESS_DEPOSIT_RECORDED: Final[str] = "Security deposit recorded"
