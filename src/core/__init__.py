"""Core domain package for slackpaste.

Core contains line classification, message assembly and deduplication logic
without any CLI, UI or rendering code, keeping the parsing logic portable.
"""
