"""
Storefront Analytics Dashboard
"""
