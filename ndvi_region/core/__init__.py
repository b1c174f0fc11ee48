"""Core utilities and shared infrastructure.

- config: Configuration loading and validation
- constants: Named constants (collection, band, metadata properties)
- exceptions: Custom exception hierarchy
- palettes: Immutable named colour palettes
"""
