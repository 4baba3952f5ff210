"""actionbot command-line interface."""
