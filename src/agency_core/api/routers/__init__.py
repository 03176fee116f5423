"""
agency_core.api.routers

One module per resource; each exposes a module-level `router`.
"""
