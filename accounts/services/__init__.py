"""
Use cases of the accounts API.

Services orchestrate the repository, the session store and the mailer;
routers call them instead of touching the database or sessions directly.
"""
