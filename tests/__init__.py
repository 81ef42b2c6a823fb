"""Test suite for the Post Sentiment Pipeline."""
