"""API Layer — HTTP routes and global error handlers."""
