"""Identity domain: accounts and password reset tokens."""
