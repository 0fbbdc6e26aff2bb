"""
school_portal.auth

Authentication/authorization package.

Responsibilities:
- Transport encryption of tokens and passwords exchanged with the web client.
- Password hashing and policy.
- JWT issuing/validation and FastAPI auth dependencies.
"""

# Package marker.


# --- Module Notes -----------------------------------------------------------
# Only `auth.deps` touches FastAPI; the other modules are framework-free.
