"""
Data loading and splitting utilities.

This subpackage provides:
- functions to load tab-separated tagging files
- train/test splitting with stratification on the tag
"""
