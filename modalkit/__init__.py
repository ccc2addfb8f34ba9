"""
modalkit: modality helpers, dataset abstractions and a model zoo on top of PyTorch.
"""

__version__ = "0.1.0"
