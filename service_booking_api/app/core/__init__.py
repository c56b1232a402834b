"""Cross-cutting infrastructure: configuration, database, security, errors and logging."""
