"""Glue around external tools: git sync of skill sources and Docker Compose services."""
