# Routes package init
"""
Hidden Gems Backend — API Routes Package
=========================================

Route Inventory:
    - health.py:  GET /                  (plain-text liveness message)
                  GET /health            (MongoDB ping, version, uptime)
    - gems.py:    GET    /api/gems       (list all gems)
                  POST   /api/gems       (create a gem)
                  GET    /api/gems/{id}  (get one gem)
                  PUT    /api/gems/{id}  (merge fields into a gem)
                  DELETE /api/gems/{id}  (delete a gem)

Routes stay thin: pull path/body values, call GemService, pick the status code.
"""
