"""
Users app package for the frontend resource hub.

Registration, session and JWT login, the role-carrying `UserProfile`, and
the super-admin user management endpoints.
"""
