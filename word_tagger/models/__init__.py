"""
Model definitions for word tagging.

This subpackage contains:
- the one-vs-all averaged perceptron builder
- persistence and prediction helpers for a fitted tagger pipeline.
"""
