"""
Top‑level package for the Mailing List API.

The HTTP service lives in the ``app`` subpackage
(``mailinglist_api.app.main``); ``client`` holds a small ``requests``
based client for talking to a running instance.
"""

__all__ = []
