"""Record cleaning, deduplication and star-schema joins.

Everything here is pure: functions take records in and return rows
out, leaving persistence to the store layer.
"""
