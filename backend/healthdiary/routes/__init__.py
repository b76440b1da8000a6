"""
Health Diary Backend — API Routes Package
==========================================

Route Inventory:
    - auth.py:    POST /api/auth/login, GET /api/auth/me
    - users.py:   GET/POST /api/users, GET/PUT/DELETE /api/users/{id}
    - entries.py: GET/POST /api/entries, GET/PUT/DELETE /api/entries/{id}
    - health.py:  GET /, GET /health

Routes stay thin: extract the request data, resolve the caller, call the
service singleton, shape the status code.
"""
