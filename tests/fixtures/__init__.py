"""
Test fixtures for the Post Sentiment Pipeline.

- factories.py: record, post and LLM reply builders plus fake collaborators
"""
