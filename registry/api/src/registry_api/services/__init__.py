"""Service layer behind the registry API implementations."""
