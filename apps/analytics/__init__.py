"""
Analytics App - Dashboard, Calendar and Payers

Pure aggregations over a property's transactions: paid and pending
balances, per-category totals, the calendar month grid with day status,
and paid expense totals per payer.
"""
