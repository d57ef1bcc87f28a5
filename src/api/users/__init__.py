"""Users bounded context.

Manages the user resource of the content platform: listing, fetching,
creating, updating and deleting user accounts, gated by role and capability
based authorization.
"""
