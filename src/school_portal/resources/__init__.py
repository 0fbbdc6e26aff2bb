"""
school_portal.resources

Declarative resource catalog.

Responsibilities:
- Field types, upload rules and `ResourceSpec` declarations.
- Selection-criteria projection of stored records.
"""

# Package marker; import `resources.catalog.REGISTRY` for the declarations.
