"""API layer - FastAPI routers standing in for the chat transport."""
