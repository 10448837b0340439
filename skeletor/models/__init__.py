"""Data models — the scaffold tree and the records produced by a run."""
