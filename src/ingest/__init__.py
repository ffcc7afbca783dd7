"""Raw occurrence ingestion and stage orchestration.

This package reads source dumps, cleans them into master datasets and
drives the materialized star-schema stages.
"""
