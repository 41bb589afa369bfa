"""Hostel mess ledger: seats, memberships, meals, groceries and billing."""

__version__ = "0.1.0"
