"""Infrastructure adapters: database, quotes, scheduling and logging."""
