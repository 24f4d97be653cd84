"""Domain layer - framework-independent business logic."""
