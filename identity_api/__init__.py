"""
RBAC identity service.

Users, roles, permissions and bearer-token authentication built as a
domain core (value objects, entities, authorization service, use cases)
with thin FastAPI and SQLAlchemy adapters around it.
"""

__version__ = "0.1.0"
