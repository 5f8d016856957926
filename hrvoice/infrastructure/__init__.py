"""Infrastructure: logging and in-memory audio storage."""
