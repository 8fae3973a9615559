"""
Inventory sync engine: external feed to local equipment reconciliation.
Version: 1.0.0
"""
