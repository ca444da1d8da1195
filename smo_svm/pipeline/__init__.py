"""Training, prediction and evaluation pipelines."""
