"""SealNote — password-gated messages for project owners.

Project owners (authenticated by an upstream gateway token) create
messages; anyone holding a message id can read it, provided they know
the message password when one is set.
"""

__version__ = "0.1.0"
