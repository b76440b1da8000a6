"""
Health Diary Client — Core Package
===================================

Infrastructure shared by every view and component:

    event_bus      → synchronous publish/subscribe between components
    http_client    → httpx wrapper: base URL, bearer token, error mapping
    auth           → login/register/logout against the API
    storage        → token/user persistence (replaces browser storage)
    router         → path → view mapping with an auth guard
    notifications  → user-facing success/error banners
"""
