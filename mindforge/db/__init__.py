"""Database models, enums and session factory."""
