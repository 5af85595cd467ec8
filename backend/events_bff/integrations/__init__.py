# Integrations package init
"""
Events BFF — Upstream Integrations
===================================

One module per upstream API. Each module only composes URLs and options;
transport, casing and logging live in `events_bff.http_client`.

Inventory:
    - events.py: customer/loan event feed
"""
