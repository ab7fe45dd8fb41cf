"""
shiftpay - attendance-driven compensation engines.

Pure calculation engines turning biometric punches and monthly attendance
tallies into shifts, allowance/deduction amounts, basic pay and bonuses.
"""

__version__ = "0.1.0"
