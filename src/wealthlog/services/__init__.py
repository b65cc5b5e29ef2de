"""Domain services: module-level functions taking repositories as arguments."""
