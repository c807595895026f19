"""
Core utilities shared across the directory backend.

Configuration, logging setup, error types, CSRF and password helpers live
here so routers/services depend on these primitives instead of reading the
environment or hashing passwords themselves.
"""
