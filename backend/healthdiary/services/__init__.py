"""
Health Diary Backend — Services Layer
======================================

Service Inventory:
    - UserService:  registration, lookup, owner updates, admin deletes
    - AuthService:  credential check and token issue
    - EntryService: per-user diary entry CRUD with ownership checks

Services are stateless singletons; each call receives the request's
AsyncSession so a route's work commits or rolls back as one transaction.
"""
