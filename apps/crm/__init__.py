"""
CRM app: customers and their credit ledger.
"""
