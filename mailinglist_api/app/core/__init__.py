"""
Shared building blocks used by both the store and the HTTP layer.
"""
