"""
Camunda Connector — Services Layer
====================================

Service Inventory:
    - Dispatcher: resolves (connector, operation) against the frozen catalog,
      validates the task envelope and invokes the handler.

The Dispatcher knows nothing about HTTP; it raises typed exceptions that
main.py maps to status codes, so it can be tested without a server.
"""
