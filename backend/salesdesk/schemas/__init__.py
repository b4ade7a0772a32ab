"""Request/response schemas. One module per resource plus shared building blocks in common.py."""
