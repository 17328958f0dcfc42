"""Slots app package.

Holds the generated slot inventory of every resource together with the
services that compute it (generator and price resolver), replace it for a
date range, synchronize it with booking decisions and purge stale rows.
"""
