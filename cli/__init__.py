"""Admin command-line interface for audition-match."""
