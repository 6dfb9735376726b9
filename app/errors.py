class TypepacerError(Exception):
    pass


class ConfigError(TypepacerError):
    pass


class ContentError(TypepacerError):
    """Content provider produced no words for an attempt."""
