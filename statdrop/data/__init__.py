"""League data model and snapshot import."""
