"""
RecipeBox Backend: Middleware Package
=======================================

What:  Cross-cutting concerns applied to every request, plus the
       authorization dependency used by the recipe write routes.

Middleware Chain (outermost first):
    Request → [Request ID] → [Preflight] → [Logging] → [GZip] → [CORS] → Route

    - Request ID is outermost so every response, preflight included,
      carries X-Request-ID
    - Preflight answers OPTIONS before routing
    - CORS adds Access-Control-Allow-Origin to ordinary responses
"""
