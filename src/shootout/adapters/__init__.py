"""External adapters for the shootout coordinator."""
