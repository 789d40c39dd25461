# Routes package init
"""
ComfortMap Backend — API Routes Package
=========================================

Route Inventory:
    - reviews.py: GET  /api/notes   (all reviews, newest first)
                  POST /api/notes   (create one review)
    - health.py:  GET  /health      (service health check)

Routes stay THIN: take the request, call the service, pick the status code.
Everything else is served from the static frontend mount in main.py.
"""
