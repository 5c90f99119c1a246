"""
Tests for image conversion and ZIP archive handling.
"""
