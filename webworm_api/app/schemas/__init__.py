"""
Pydantic schema definitions for API payloads.

Schemas are separated from the database rows to decouple the API
representation from persistence: the store keeps URL templates while
clients always see rendered URLs.
"""
