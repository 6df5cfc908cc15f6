"""Resource access operations.

Every public function here takes ``(db, principal, ...)`` (or just ``db`` for
the sign-in flows), is wrapped by :func:`hydromon.access.guarded` or
:func:`hydromon.access.public`, and returns pydantic models that serialize
straight to JSON.
"""
