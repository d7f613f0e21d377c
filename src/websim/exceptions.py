from __future__ import annotations


class WebsimError(Exception):
    pass


class WebsimRuntimeError(RuntimeError):
    pass


class GeneratorEmptyError(WebsimRuntimeError):
    """
    Raised by ``peek()`` or ``poll()`` on a generator that has no next item. Callers must check
    ``is_empty()`` first.
    """
    pass


class GeneratorOrderError(WebsimRuntimeError):
    """A generator produced a cloudlet with an ideal start time before its predecessor's."""
    pass


class HostNotAssignedError(WebsimRuntimeError):
    pass


class HostBindingError(WebsimRuntimeError):
    pass


class UnknownHostError(WebsimRuntimeError):
    pass
