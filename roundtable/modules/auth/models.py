# Supabase Auth
# This module uses Supabase's built-in authentication system
# No custom tables are required - Supabase Auth handles:
# - User registration and login (auth.users table)
# - JWT token generation and validation
# - Password hashing and security

"""
This service only consumes Supabase Auth:
- auth.get_user(jwt) - Resolve the bearer token sent by the client

The username is read from user_metadata.username (set at sign-up by the
frontend) and falls back to the local part of the email address.
"""
