"""Services for external integrations."""
