"""
Pydantic schema definitions for API payloads.

Each domain (users, services, bookings, dashboard) defines its own
Pydantic models for request and response bodies.  Schemas are
separated from the stored MongoDB documents to decouple the API
representation from persistence: documents keep snake_case keys while
the JSON exchanged with the web front end is camelCase (see
``base.APIModel``).
"""
