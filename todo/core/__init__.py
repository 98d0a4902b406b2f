"""
Core primitives shared across the todo backend.

This package hosts configuration, logging setup, the error taxonomy, the
request cancellation token and password hashing. Services and repositories
depend on these modules instead of reading os.environ or raising ad-hoc
exceptions.
"""
