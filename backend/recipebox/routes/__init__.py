"""
RecipeBox Backend: API Routes Package
=======================================

Route Inventory:
    - auth.py:     POST /api/auth/signup, POST /api/auth/login
    - recipes.py:  /api/recipes/... and GET /api/stats
    - health.py:   GET  /health

Routes stay thin: they pull values out of the request, resolve the
identity where needed and call a service. Business rules live in services.
"""
