"""
agency_core.api

HTTP surface for the agency core.

Responsibilities:
- FastAPI app factory and router modules.
- API-layer dependency wiring and request/response models.
"""

# Package marker.


# --- Module Notes -----------------------------------------------------------
# Routers stay thin: parse the request, resolve the caller, delegate to a service.
