"""
Green energy app: investment plans, equipment sales and deliveries.
"""
