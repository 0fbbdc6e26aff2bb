"""
school_portal.api.routers

Router modules grouped by resource area.
"""

# Package marker.
