# Routes package init
"""
Alpha Tower Backend — API Routes Package
==========================================

What:  Route handlers (the controller layer) grouped into one APIRouter per
       resource; the router tables carry the auth gate and schemas.

Route Inventory:
    - health.py:   GET /, GET /health
    - products.py: GET/POST /products, GET/PUT/DELETE /products/{id}
    - users.py:    GET/POST /users, GET/PUT/DELETE /users/{id},
                   PATCH /users/avatar
    - sessions.py: POST /sessions
    - files.py:    GET /files/{path}

Design Principle:
    Handlers only extract request fields, call one service and choose the
    status code. Service errors propagate to the handlers in main.py.
"""
