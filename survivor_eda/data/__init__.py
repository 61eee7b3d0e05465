"""Input loading, validation and team identity resolution."""
