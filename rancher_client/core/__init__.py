"""Core contracts, error taxonomy and logging for rancher_client."""
