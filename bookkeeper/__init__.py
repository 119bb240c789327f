"""
Bookkeeping Dashboard - Source Package

Transaction tracking, bill reminders and financial reports for a small
business, with Google Sheets as the book of record.

DESIGN PRINCIPLES:
1. Views are pure functions of the record lists they are given
2. Lateness of a bill is decided in one place
3. The backend being down never stops the user working
4. Every degradation (sample data, unsaved write) is logged
5. Storage layer is swappable
"""

__version__ = "1.0.0"
