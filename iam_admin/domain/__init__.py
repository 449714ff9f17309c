"""Domain layer - pure business logic.

Structure:
- enums/: isolation, privacy, lifecycle and per-kind enumerations
- entities/: scoped entities and user dependents
- services/: access control, diffing, hierarchy, template rendering
- aggregates/: entity + pending events, factories and mutations
- events/: typed domain events, registry and wire codec
- value_objects/: criteria, pagination, read model document
- protocols/: ports implemented by infrastructure

No framework or infrastructure imports.
"""
