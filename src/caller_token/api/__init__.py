"""FastAPI integration for caller token validation."""
