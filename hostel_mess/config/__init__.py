"""
Configuration package for the hostel mess ledger.
"""

from hostel_mess.config.settings import Settings, get_settings, settings

__all__ = ['Settings', 'get_settings', 'settings']
