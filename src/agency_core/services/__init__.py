"""
agency_core.services

Service-layer package.

Responsibilities:
- Own transaction boundaries and persistence decisions.
- Resolve identity and agency, authorize, then act on creators and deals.
"""

# Package marker.


# --- Module Notes -----------------------------------------------------------
# Services are plain async classes over an AsyncSession; the API layer only wires them.
