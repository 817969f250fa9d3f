"""
Camunda Connector — API Routes Package
========================================

Route Inventory:
    - connectors.py:  POST /csp/{connectorName}   (dispatch to a registered handler)
    - health.py:      GET  /health                (liveness + catalog listing)

Routes stay thin: decode the request, call the Dispatcher, return the
result. Error formatting lives in the global exception handlers.
"""
