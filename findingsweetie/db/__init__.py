"""Storage: declarative base, database handle and migrations."""
