"""Household ledger: valuations, reconciliation and net worth."""
