"""Core services — the side-effecting pieces of a provisioning run."""
