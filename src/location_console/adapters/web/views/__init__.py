"""Views for the web adapter."""
