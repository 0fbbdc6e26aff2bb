"""
school_portal.jobs

Background jobs that run inside the API process.

Responsibilities:
- Hourly housekeeping (default admin bootstrap, log mailing).
"""

# Package marker.
