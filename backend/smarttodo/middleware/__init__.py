# Middleware package init
"""
SmartTodo Backend - Middleware Package
=======================================

What:  Cross-cutting concerns applied to every HTTP request.

Middleware Chain (order matters!):
    Request → [CORS] → [Correlation ID] → [Access Log] → [Exception Translation] → Route

    1. CORS outermost: preflight handled early, CORS headers on every
       response including translated errors
    2. Correlation ID: resolves the correlation id and trace id, echoes the
       header on the response
    3. Access Log: one line per request with the final status
    4. Exception Translation: any exception from routes or the dispatcher
       becomes an application/problem+json response

    Responses travel back in reverse order.
"""
