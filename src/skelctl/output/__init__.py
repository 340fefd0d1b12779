"""Output layer — render ServiceResult for humans or machines."""
