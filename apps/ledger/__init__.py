"""
Ledger app: transactions, installment groups and the state coordinator.
"""
