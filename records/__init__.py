"""Records application for the SamaCarnet backend.

This package contains the multi-tenant medical records models, their
repositories and codecs, the visit audit trail, seeders and the small
HTTP surface (health check and tenant-scoped login).
"""
