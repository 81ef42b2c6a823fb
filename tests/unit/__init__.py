"""
Unit tests for the Post Sentiment Pipeline.

Components are tested in isolation with an in-memory store, fake source
fetchers, mocked LLM clients and an injected sleep.
"""
