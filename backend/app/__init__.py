"""FastAPI application: controllers, routers and middleware."""
