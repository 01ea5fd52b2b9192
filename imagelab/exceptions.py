class ImagelabError(Exception):
    """Base class for every error raised by the engine."""


class InvalidArgumentError(ImagelabError, ValueError):
    """Malformed, missing or out-of-range command parameter."""


class ImageNotFoundError(ImagelabError, LookupError):
    """Referenced image name is absent from the store."""

    def __init__(self, name: str):
        super().__init__(f"Image not found: {name}")
        self.name = name
