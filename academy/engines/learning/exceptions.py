"""
Learning engine exceptions.
"""


class PersistenceError(Exception):
    """A persistence collaborator could not be reached or gave an unusable answer."""
