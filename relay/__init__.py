"""Futura notification relay.

Turns newly written email-request documents into one HTTPS call to the
notification API.
"""

__version__ = "0.1.0"
