# Supabase Auth
# This module uses Supabase's built-in authentication system
# No custom tables are required - Supabase Auth handles:
# - User registration (auth.users table) and email confirmation
# - User login and session management
# - JWT token generation and validation
# - Password hashing and security

"""
Supabase Auth provides:
- auth.sign_up() - Register new users (full_name stored in user_metadata)
- auth.sign_in_with_password() - Authenticate users
- auth.get_user() - Get current user from JWT token
- auth.sign_out() / auth.admin.sign_out() - Logout users
- auth.admin.list_users() / auth.admin.delete_user() - used by the admin module

The display name shown on posts and comments is user_metadata.full_name,
falling back to the email address.
"""
