"""
Wallets App

User balances, the wallet transaction ledger, deposit and withdrawal
requests with admin review, and the deposit addresses shown to investors.
"""
