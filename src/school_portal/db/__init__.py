"""
school_portal.db

Persistence package (SQLAlchemy async).

Responsibilities:
- Provide ORM models, engine/session setup, search filters and repositories.
"""

# Package marker.


# --- Module Notes -----------------------------------------------------------
# Only repositories touch SQLAlchemy query APIs; services work with models and dicts.
