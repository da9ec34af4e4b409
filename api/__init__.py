"""
HTTP layer for the Pixel Transform service
"""
