"""
Pydantic schema definitions for API payloads.

Field names on the wire are capitalised (``Email``, ``ConfirmedAt``)
and mapped onto snake_case attributes through aliases.
"""
