# Services package init
"""
SmartTodo Backend - Services Layer
===================================

What:  The todo feature: requests, validators, handlers and persistence.
How:   Routes build a request and hand it to the dispatcher; the dispatcher
       validates it, logs it and calls the handler registered for its type.

Service Inventory:
    - todo_requests.py:   TodoRequest closed union (CreateTodoItem, ...)
    - todo_validators.py: One Validator per request type (Delete has none)
    - todo_handlers.py:   One async handler per request type
    - todo_store.py:      TodoStore interface + SQLAlchemy implementation
    - registration.py:    build_registry() / build_dispatcher()
"""
