"""
Data access layer.

``EmailStore`` owns the ``emails`` table and issues one parameterized
statement per operation.
"""
