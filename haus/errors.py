class HausError(Exception):
    pass


class ClassifierUnavailableError(HausError):
    """The upstream risk classifier could not produce scores."""


class CompletionUnavailableError(HausError):
    """The text-completion provider is not configured or failed."""
