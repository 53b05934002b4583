# chuk_ai_preconnect/exceptions.py
"""Exception hierarchy for chuk_ai_preconnect."""


class PreconnectError(Exception):
    """Base class for all errors raised by this package."""


class ProbeError(PreconnectError):
    """A network probe could not reach its target."""

    def __init__(self, target: str, message: str = "probe failed"):
        self.target = target
        super().__init__(f"{message}: {target}")


class ProbeTimeoutError(ProbeError):
    """A network probe was cancelled because its deadline passed."""

    def __init__(self, target: str, message: str = "probe timed out"):
        super().__init__(target, message)
