"""
Application package initializer.

The service is split into two thin layers.  ``services`` owns the
subscriber table and runs parameterized SQL against it; ``api``
translates JSON requests into store calls and store results back into
JSON responses.  ``core`` holds the cross-cutting pieces (settings,
logging, database connections and error handling).
"""

from .main import app  # noqa: F401
