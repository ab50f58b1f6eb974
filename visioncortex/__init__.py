"""Computer-vision primitives: images, bounds, clustering, matrices and perspective transforms."""

__version__ = "0.8.8"