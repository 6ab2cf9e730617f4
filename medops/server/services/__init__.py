"""
Service layer.

Services hold the workflows behind the API: they load records through the
repository bundle, apply the pure rules in ``medops.core.rules``, stage the
changes and commit them as one unit of work.
"""
