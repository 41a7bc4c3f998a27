# Routes package init
"""
Docs Wallet Backend — API Routes Package
=========================================

Route Inventory:
    - root.py:    GET  /                   (liveness string)
                  POST /jwt                (issue bearer token)
    - users.py:   POST /users              (register, public)
                  GET  /user               (current user)
    - images.py:  POST /images             (multipart upload)
                  GET  /images             (caller's images)
                  DELETE /images/{id}      (two-step delete)
    - works.py:   POST /works, GET /works, DELETE /works/{id}
    - health.py:  GET  /health             (dependency probe)

Routes stay thin: extract the request data and the caller claim, call a
service, return its result. Errors propagate to the global handlers.
"""
