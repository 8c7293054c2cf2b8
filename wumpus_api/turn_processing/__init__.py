"""Turn/action processing helpers.

This package centralizes the access gate, target parsing, and turn rotation so
every route flows through the same checks and shows up consistently in server logs.
"""
