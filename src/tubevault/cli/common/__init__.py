"""Shared CLI plumbing: global context, reusable options and error handling."""
