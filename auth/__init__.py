"""auth/ -- Accounts, password hashing, and access tokens for Teashop.

Layer rule: auth/ imports only core/, stdlib, and third-party libraries.
It does NOT import from api/, inventory/, or services/.
services/ and api/ import from auth/, not the other way around.
"""
