"""Client-facing request handling."""
