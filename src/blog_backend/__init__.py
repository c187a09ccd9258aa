"""
Blog Backend: a minimal blogging API.

Users sign up and log in with JWT bearer tokens, publish posts, comment on them and
keep a list of favorite posts. Data lives in MongoDB.
"""

__version__ = "1.0.0"
