"""
agency_core.auth

Authentication package.

Responsibilities:
- JWT issuing and validation.
- Password hashing.
- FastAPI dependency turning a bearer token into a `Principal`.
"""

# Package marker.


# --- Module Notes -----------------------------------------------------------
# Authorization (agency ownership) is not decided here; see `services.ownership`.
