"""JSON API endpoints."""
