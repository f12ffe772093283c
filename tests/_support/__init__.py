"""
Test support utilities for spine-mysql tests.

Helpers that are not pytest fixtures themselves: an in-memory stand-in
for an aiomysql pool and the Dummy entity with its persistences.
"""
