"""
Training pipeline for the word tagger.
"""
