"""Runtime configuration for the audition-match platform."""
