"""
Utility functions module.

Time Semantics:
- All timestamps are timezone-aware UTC datetimes
- Components take an injectable clock so tests can control "now"
- Timestamps leave the system as ISO8601 strings
"""
