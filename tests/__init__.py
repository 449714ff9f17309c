"""Test suite for the iam_admin service.

Test structure follows the test pyramid:
- unit/: Unit tests - domain logic, use cases and adapters in isolation
- integration/: Integration tests - the full command, outbox, projection and
  query pipeline on in-memory stores (plus opt-in PostgreSQL tests)
"""
