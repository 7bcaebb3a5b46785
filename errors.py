class SecstoreError(Exception):
    """Base class for every error secstore reports to the operator."""


class PathResolutionError(SecstoreError):
    pass


class KeyRingReadError(SecstoreError):
    pass


class UnknownRecipientError(SecstoreError):
    """An access-list identity has no key in the public ring."""

    def __init__(self, identity: str):
        super().__init__(f"Unknown recipient: {identity}")
        self.identity = identity


class InvalidRecipientError(SecstoreError):
    """The requested recipient has no key in the private ring."""

    def __init__(self, identity: str):
        super().__init__(f"Invalid recipient: {identity}")
        self.identity = identity


class DecryptionError(SecstoreError):
    pass


class EncryptionError(SecstoreError):
    pass


class RegexCompileError(SecstoreError):
    pass
