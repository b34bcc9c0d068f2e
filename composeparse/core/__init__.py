"""Core runtime pieces: configuration, errors, inputs and logging."""
