"""API helpers — error translation for the FastAPI apps that embed the compliance engine."""
