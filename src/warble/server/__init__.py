"""ASGI host: runs a Dispatcher behind ASGI and renders propagated errors."""
