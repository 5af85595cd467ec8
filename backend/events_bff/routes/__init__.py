# Routes package init
"""
Events BFF — API Routes Package
================================

Route Inventory:
    - events.py:  GET /all-events   (event snapshot for the session's loan)
    - health.py:  GET /health       (liveness)

Design Principle:
    Routes are THIN. They pull the session and request context out of the
    request, call one service function and return its result.
"""
