"""Business logic layer for identity app.

This package plays the identity provider for the rest of the project:
- Provider accounts keyed by email
- One-time email codes (issue and exchange)
- Provider sessions (create, resolve, delete)
"""
