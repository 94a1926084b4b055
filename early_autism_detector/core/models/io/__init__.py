"""
API I/O models.

Pydantic request/response schemas, one module per resource. Portal-facing
schemas (admin, center portal) use camelCase field names on the wire.
"""
