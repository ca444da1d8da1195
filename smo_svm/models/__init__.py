"""Kernels, whitening, the SMO solver and the SVM model."""
