"""
Standard type definitions for database models.

Provides consistent types for monetary fields across all models.
"""

from sqlalchemy import DECIMAL

# Standard money type for amounts, balances, commissions
# Precision: 12 digits total, 2 after decimal point
# Suitable for: ETB balances and payouts
# Range: up to 9,999,999,999.99
MoneyType = DECIMAL(12, 2)
