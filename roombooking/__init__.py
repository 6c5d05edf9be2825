"""Conference room booking recorder for a LINE mini-app."""
