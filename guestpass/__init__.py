"""Time-limited guest network credentials with optional administrator approval."""
