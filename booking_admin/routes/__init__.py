"""API routers for the admin console."""
