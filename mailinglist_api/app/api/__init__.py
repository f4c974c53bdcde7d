"""
HTTP layer.

``router`` aggregates the endpoint modules; ``deps`` provides the
dependencies they share.
"""
