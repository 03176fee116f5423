"""
agency_core.drafting_clients

Clients for the AI drafting collaborator.

Responsibilities:
- Implement `services.drafting.EmailDrafter` against a concrete LLM provider.
"""

# Package marker.


# --- Module Notes -----------------------------------------------------------
# Services depend on the `EmailDrafter` protocol, never on a provider SDK directly.
