"""Infrastructure layer — subprocesses, git lookups, and template files."""
