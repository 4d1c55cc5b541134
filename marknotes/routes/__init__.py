# Routes package init
"""
MarkNotes Backend - API Routes Package
======================================

What:  HTTP route handlers that accept requests and return responses.
How:   Each route module handles a specific resource or action.

Route Inventory:
    - auth.py:    POST /register, POST /login
    - notes.py:   POST /notes, GET /notes, GET /notes/{id}/html,
                  PUT /notes/{id}, DELETE /notes/{id}
    - upload.py:  POST /upload           (markdown file -> note)
    - grammar.py: POST /check-grammar    (proxy to grammar service)
    - health.py:  GET  /health

Routes stay thin: extract request data, call a service, return its result.
Business logic lives in services.
"""
