"""Token acquisition for application and delegated identities."""
