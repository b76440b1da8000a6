"""
Health Diary Client — Package Initializer
==========================================

What: The client-side application layer of the Health Diary.
Why:  Keeps the calendar, chart and entry forms in sync with the REST API
      through one cached entry store and a publish/subscribe bus.

Layering:
    ┌─────────────────────────────────────┐
    │   Views (login, register, dashboard)│  ← one per route
    ├─────────────────────────────────────┤
    │   Components (calendar, chart, list)│  ← re-render from bus payloads
    ├─────────────────────────────────────┤
    │   Services (EntryService cache)     │  ← single fetch, de-duplicated
    ├─────────────────────────────────────┤
    │   Core (bus, router, http, auth)    │
    └─────────────────────────────────────┘
"""

__version__ = "1.0.0"
