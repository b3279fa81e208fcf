"""Infrastructure services shared by the adapters and the domain."""
