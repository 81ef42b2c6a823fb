"""
Post Sentiment Pipeline.

Ingests short text posts from external sources, classifies their sentiment
with a language model in batches, and tracks every post through the
pending → processing → completed/failed lifecycle.
"""

__version__ = "0.1.0"
