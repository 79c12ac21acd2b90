"""
Infrastructure Layer
=====================

Shared technical plumbing: database engine and session lifecycle.
"""
