"""Clients for the external services the action talks to.

These modules fetch data from GitHub (commits, comments) and Linear
(issues) and convert the raw payloads into the typed records the
release-note pipeline works with.
"""
