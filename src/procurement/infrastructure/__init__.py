"""Infrastructure adapters: SQLite storage, policy-based authorization, notifications."""
