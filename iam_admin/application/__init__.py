"""Application layer: commands, queries, projections and DTOs.

Imports only ``iam_admin.core`` and ``iam_admin.domain``; infrastructure is
injected through domain protocols.
"""
