"""Screen-based project estimation service."""
