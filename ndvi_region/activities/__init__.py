"""Local, synchronous processing steps.

- prepare_region: Centroid, bounding box and output dimensions
"""
