"""
Auth package for the LinkPulse API.

HTTP Basic authentication whose only job is to establish the link owner:
the authenticated username (lower-cased) is recorded on every link created
and scopes the "overall" analytics view.
"""
