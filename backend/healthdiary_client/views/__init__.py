"""
Health Diary Client — Views Package
====================================

One view per route, built fresh by the router on every navigation:

    /login      → LoginView
    /register   → RegisterView
    /dashboard  → DashboardView (requires login)
    /           → WelcomePage
    *           → NotFoundPage
"""
