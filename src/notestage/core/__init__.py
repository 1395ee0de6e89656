"""Content tree, routing and Markdown rendering pipeline."""
