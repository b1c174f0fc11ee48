"""NDVI region imagery retrieval.

Computes the centroid, bounding box, and aspect-preserving output
dimensions of an arbitrary polygon, then retrieves the least-cloudy NDVI
scene for a date range from a remote imagery service, clipped to the
polygon, and returns its metadata plus a thumbnail URL.
"""

from ndvi_region.orchestrators.authentication import analyze_region

__all__ = ["analyze_region"]

__version__ = "0.1.0"
