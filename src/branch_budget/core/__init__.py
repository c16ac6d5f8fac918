"""Core data model: enums, staging schemas, scope and the repository seam."""
