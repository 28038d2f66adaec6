"""
In-memory Todo API package.

The FastAPI application lives in ``todo_api.main``; the query engine
(filtering, sorting, offset and cursor pagination) in ``todo_api.query``.
"""
