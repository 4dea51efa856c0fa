"""
Data-access functions. Each takes the request's AsyncSession, only flushes,
and leaves commit/rollback to the session dependency.
"""
