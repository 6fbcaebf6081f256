"""Exception types for gpmdp_rc."""


class RemoteControlError(Exception):
    """Base class for every error that ends a command invocation."""
    pass


class ConfigError(RemoteControlError):
    """Config file missing, unreadable or incomplete."""
    pass


class ArgumentError(RemoteControlError):
    """Bad command line: unknown verb, missing or unparsable argument."""
    pass


class OutOfRangeError(ArgumentError):
    """Ordinal does not select an entry of the displayed list."""
    pass


class ProtocolError(RemoteControlError):
    """Inbound message is missing a field or has the wrong type."""
    pass


class AuthError(RemoteControlError):
    """Server refused the stored token."""
    pass


class TransportError(RemoteControlError):
    """Websocket connect, send or receive failed."""
    pass


class WatchdogTimeout(RemoteControlError):
    """Server did not finish the command before the watchdog fired."""
    pass
