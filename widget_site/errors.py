class SiteConfigError(ValueError):
    """Raised for an unreadable site file or a bad setting."""


class ServerNotReady(TimeoutError):
    """The static server did not answer before the readiness timeout."""


class ResolutionError(Exception):
    """Base class for failures while addressing elements on the page."""

    def __init__(self, selector, message):
        super().__init__(message)
        self.selector = selector


class AmbiguousResolution(ResolutionError):
    def __init__(self, selector, count):
        super().__init__(
            selector,
            f"strict mode violation: selector resolved to {count} elements ({selector!r})",
        )
        self.count = count


class MissingElement(ResolutionError):
    def __init__(self, selector):
        super().__init__(selector, f"selector resolved to no elements ({selector!r})")


class ResolutionTimeout(ResolutionError):
    def __init__(self, selector, condition, timeout):
        super().__init__(
            selector,
            f"timed out after {timeout}ms waiting for {selector!r} to be {condition}",
        )
        self.condition = condition
        self.timeout = timeout


class UnreachableInteraction(ResolutionError):
    def __init__(self, selector, action):
        super().__init__(selector, f"cannot {action} {selector!r}: element is not visible")
        self.action = action
