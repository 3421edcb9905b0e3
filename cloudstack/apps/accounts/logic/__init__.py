"""Business logic layer for accounts app.

Application user records and resolution of the current user from the
session cookie. Identity itself (codes, sessions) is delegated to the
identity app.
"""
