"""Distance estimates and route providers."""
