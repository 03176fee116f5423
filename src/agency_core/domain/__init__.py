"""
agency_core.domain

Storage-independent domain rules.

Responsibilities:
- Deal status graph (`lifecycle`).
- Field constraints for creators, deals and agencies (`schemas`).
"""

# Package marker.
