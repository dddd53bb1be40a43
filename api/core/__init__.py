"""
Shared, cross-cutting code for the API.

`core/` holds the process plumbing every feature relies on (settings, the
MongoDB connection handle, logging, the HTTP listener). Keep product queries
and business rules in the feature package (`products/`).
"""
