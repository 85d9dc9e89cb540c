"""
Real estate app: properties, fixed-term investment plans and property
purchases paid in full or in installments.
"""
