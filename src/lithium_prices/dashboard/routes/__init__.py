"""HTTP route modules for the dashboard."""
