"""
High-level use cases for the directory.

Each service module orchestrates the repository and adapters to implement
business rules (resolve a slug, toggle a like, approve a submission, etc.).

Routers (FastAPI endpoints) call these services instead of touching the
database or sessions directly.
"""
