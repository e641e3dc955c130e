"""
Core modules for ReFAQ.

This package contains the response-resolution pipeline: rate limiting,
intent classification, yield calculation and the resolver tying them together.
"""
