"""
ShelfLink Test Suite

Tests are organized into:
- unit/: Unit tests for matching, link repair and calibration
- integration/: Integration tests for the API
"""
