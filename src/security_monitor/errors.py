"""Exceptions raised by the security monitor."""


class MonitorError(Exception):
    pass


class TraversalError(MonitorError):
    """A directory or file could not be read during a scan."""


class SinkDeliveryError(MonitorError):
    """A notification sink failed to deliver a finding."""

    def __init__(self, sink_name: str, cause: BaseException):
        super().__init__(f"{sink_name} failed: {cause}")
        self.sink_name = sink_name
        self.cause = cause


class ConfigurationIncomplete(MonitorError):
    """A network sink is missing credentials and stays disabled."""


class ConcurrentScanRejected(MonitorError):
    """A scan was requested while another cycle is still running."""


class InvalidTargetRoot(MonitorError):
    pass


class InvalidConfiguration(MonitorError):
    pass
