# Services package init
"""
Events BFF — Services Layer
============================

What:  Maps browser-facing operations onto upstream integrations.
Why:   Routes stay HTTP-only; services decide which session values feed which call.

Service Inventory:
    - events_service: home snapshot (session → events API)
"""
