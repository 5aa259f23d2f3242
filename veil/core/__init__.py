"""Core primitives shared by the registry and the ledger dispatcher (events)."""
