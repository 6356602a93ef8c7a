"""Shared contracts (enums, errors, protocols, schedulers) for the loop."""
