"""
Shared utility functions.

This subpackage includes:
- config loading and directory helpers
- seeding and the explicit training context
- lightweight logging helpers used across the project.
"""
