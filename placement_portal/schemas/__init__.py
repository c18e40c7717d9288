"""
Schemas module - Request/Response schemas for API endpoints.

Difference from models:
- Models: Domain entities the services and stores exchange
- Schemas: API contract (what client sends/receives)
"""
