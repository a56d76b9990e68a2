"""HTTP middleware: request IDs, request logging and authentication."""
