"""Key/value persistence for configuration and watermarks."""
