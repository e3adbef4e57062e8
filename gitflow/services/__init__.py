"""Workflow services (start, sync, cleanup, commit, status, init, doctor)."""
