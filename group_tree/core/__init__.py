"""Core, UI-agnostic logic: node model, structural queries, drop policy,
restructuring engines, validation and forest construction."""
