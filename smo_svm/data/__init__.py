"""Dataset loading for the training and evaluation pipelines."""
