class InvalidArgumentError(ValueError):
    """
    Raised when a domain value is rejected before it reaches the database,
    e.g. an unknown article status or a blank title.

    Subclasses ``ValueError`` so ORM ``@validates`` hooks can raise it
    naturally; the application translates it to a 422 response.
    """
