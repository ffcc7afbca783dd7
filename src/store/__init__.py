"""Storage layer for materialized tables.

This package persists every pipeline stage as a versioned table,
renders views of the star schema and exports results to S3.
"""
