"""Core domain: models, ports and the collection pipeline."""
