"""
school_portal.services

Service-layer package.

Responsibilities:
- Own transaction boundaries and persistence decisions.
- Coordinate repositories, file storage and mail for each API operation.
"""

# Package marker.


# --- Module Notes -----------------------------------------------------------
# Services raise `school_portal.errors` exceptions and return plain outcomes; the
# API layer turns both into the response envelope.
