"""Domain layer: catalog model, ports and the URL regeneration service."""
