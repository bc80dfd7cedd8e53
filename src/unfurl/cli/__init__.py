"""unfurl command-line interface."""
