"""
ReFAQ - question answering for Re Protocol.

Remote chat completion with a deterministic keyword and calculator fallback.
"""

__version__ = "0.1.0"
