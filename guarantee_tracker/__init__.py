"""
Guarantee Tracker

Tracks bank guarantee letters and bank credits drawn against projects,
commission payments made on letters, and a manually maintained
exchange-rate table for multi-currency totals.
"""

__version__ = "1.0.0"
