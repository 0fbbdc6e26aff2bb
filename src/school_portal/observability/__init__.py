"""
school_portal.observability

Observability package.

Responsibilities:
- Structured logging configuration (stdout + optional hourly files).
- Request context propagation for consistent log enrichment.
"""

# Package marker.


# --- Module Notes -----------------------------------------------------------
# The hourly log files written here are what the housekeeping job mails out.
