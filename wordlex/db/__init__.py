"""SQLite storage for wordlex lexica."""
