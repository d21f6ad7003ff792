class StartupError(Exception):
    """Database unreachable or schema setup failed at launch."""


class StoreError(Exception):
    """A statement failed while serving a request."""
