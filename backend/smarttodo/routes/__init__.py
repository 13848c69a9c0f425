# Routes package init
"""
SmartTodo Backend - API Routes Package
=======================================

What:  HTTP route handlers that accept requests and return responses.

Route Inventory:
    - todo_items.py:   /api/todoitems CRUD (every call goes through the dispatcher)
    - health.py:       GET /health (service health check)
    - dependencies.py: Dispatcher, store and DispatchContext dependencies

Design Principle:
    Routes are THIN. They map HTTP onto a todo request, dispatch it and
    pick the status code. Validation, logging and error responses are
    the pipeline's and the middleware's job.
"""
