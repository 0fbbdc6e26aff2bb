"""
school_portal.api

HTTP surface of the school portal.

Responsibilities:
- FastAPI app factory and router modules.
- Request payload reading, the response envelope and error translation.
"""

# Package marker.


# --- Module Notes -----------------------------------------------------------
# Routers stay thin: read the payload, check auth, delegate to `school_portal.services`.
