"""
Calculation engines, data models and validation.
"""
