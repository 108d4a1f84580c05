"""Posts, comments and profile API backed by an in-memory store and a JSON snapshot."""
