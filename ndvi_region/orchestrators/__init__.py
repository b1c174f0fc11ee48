"""Orchestration: the region analysis flow and its authentication gate."""
