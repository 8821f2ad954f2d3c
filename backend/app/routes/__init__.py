# Routes package init
"""
Benefícios API: Routes Package
===============================

Route Inventory:
    - beneficios.py:  /api/beneficios/*   (list, get, search, create, update, delete)
    - health.py:      GET /api            (status payload)
                      GET /health         (MongoDB probe)

Routes stay thin: read the request, call the service, return the result.
"""
