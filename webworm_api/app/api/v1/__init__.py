"""
Version 1 of the API.

Bundles the typed bookmark routes and the command bridge used by the
desktop frontend.
"""
