# Supabase Auth
# Identity is owned entirely by Supabase Auth; this service keeps no user tables.

"""
Supabase Auth provides:
- auth.get_user() - resolve the user behind a JWT access token

Sign-up, sign-in, token refresh and sign-out happen between the frontend and
Supabase directly. The backend only turns a bearer token into a user id that
is then passed explicitly into every inventory operation.
"""
