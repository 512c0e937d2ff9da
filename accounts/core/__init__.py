"""
Cross-cutting pieces shared across the accounts API: configuration, logging,
errors and the response envelope, password hashing, the mail adapter and the
request guards (payload validation, login check).
"""
