"""
Utilities Module
================

Helper functions and utility classes.
"""

from lifeos.utils.helpers import local_today, parse_date, parse_datetime, utc_now

__all__ = ["local_today", "parse_date", "parse_datetime", "utc_now"]
