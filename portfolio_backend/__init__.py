"""
Backend package for the portfolio site.

This package provides a FastAPI application with storage and database
abstractions so the admin content-management layer can run against a
managed Postgres and S3-compatible object storage, or fully in memory.
"""
