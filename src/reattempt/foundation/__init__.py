"""Foundation - configuration, error types and test helpers for reattempt."""
