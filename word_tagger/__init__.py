"""
Top-level package for the word tagger.

This package contains modules for:
- loading tab-separated tagging data and splitting it
- word-level features: string statistics, before/after context,
  word normalization, pretrained embeddings
- composition of all features into one scikit-learn pipeline
- the one-vs-all averaged perceptron classifier and its persistence
- the training pipeline and evaluation metrics
- shared helper functions (config, seeding, logging)
"""
