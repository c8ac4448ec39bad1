"""Fatal machine errors.

Every error here aborts the run. The core raises them and never catches
them inside the instruction loop; the driver decides how to report.
"""


class MachineError(Exception):
    """Base class for all fatal machine conditions."""


class LoadError(MachineError, ValueError):
    """Program image does not fit in memory."""


class DecodeError(MachineError, ValueError):
    """Opcode not assigned in the active instruction set."""


class RegisterError(MachineError, IndexError):
    """General register selector outside 0..3."""


class DeviceError(MachineError):
    """Console device received an unrepresentable character."""


class InputAborted(DeviceError):
    """Input source delivered an interrupt instead of a key."""
