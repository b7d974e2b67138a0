"""
Evaluation utilities.

This subpackage provides multiclass metrics (micro/macro accuracy,
top-k accuracy, per-tag precision/recall, confusion matrix) and a text
report used in the training log.
"""
