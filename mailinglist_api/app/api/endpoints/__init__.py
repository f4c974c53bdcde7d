"""
Endpoint modules.  Each defines an ``APIRouter`` that ``router.py``
includes in the application.
"""
