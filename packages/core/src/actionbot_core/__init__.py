"""Execution context for actionbot commands."""
