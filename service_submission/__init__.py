"""
Registry submission service.
"""
