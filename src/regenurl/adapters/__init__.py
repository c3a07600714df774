"""Adapters binding the regeneration ports to concrete infrastructure."""
