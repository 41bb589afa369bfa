from hostel_mess.services.room.seat_ledger_service import SeatLedgerService

__all__ = ["SeatLedgerService"]
