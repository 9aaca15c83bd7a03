"""LLM channel review module.

``review_client`` talks to the chat-completions provider, ``prompts`` builds
the fixed prompt pair and ``review_service`` puts the review cache in front
of both.
"""
