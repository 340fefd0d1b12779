"""Configuration — settings sources, discovery, and logging setup."""
