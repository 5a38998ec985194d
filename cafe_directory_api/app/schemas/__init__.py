"""
Pydantic schema definitions for API payloads.

Schemas are kept separate from the SQL in the service layer so the
API representation does not depend on the table layout.
"""
