"""Multi-tenant administration backend.

Tenants, organizations, departments, users and notification templates, with
hierarchical data isolation and an outbox-fed read model projection.
"""

__version__ = "0.1.0"
