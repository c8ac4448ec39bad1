"""Register file: four 8-bit general registers plus ip and rp."""

from ..errors import RegisterError

NUM_REGISTERS = 4


class RegisterFile:
    """General registers r0-r3 and the 16-bit ip/rp control registers.

    ip and rp wrap modulo 65536 on assignment. General registers are
    addressed by a 2-bit selector; anything else raises RegisterError.
    """

    def __init__(self) -> None:
        self._regs: list[int] = [0] * NUM_REGISTERS
        self._ip: int = 0
        self._rp: int = 0

    @property
    def ip(self) -> int:
        """Address of the next instruction byte to fetch."""
        return self._ip

    @ip.setter
    def ip(self, value: int) -> None:
        self._ip = value & 0xFFFF

    @property
    def rp(self) -> int:
        """Return address captured by call instructions."""
        return self._rp

    @rp.setter
    def rp(self, value: int) -> None:
        self._rp = value & 0xFFFF

    def get(self, selector: int) -> int:
        """Read general register r<selector>."""
        if not 0 <= selector < NUM_REGISTERS:
            raise RegisterError(f"No such register: r{selector}")
        return self._regs[selector]

    def set(self, selector: int, value: int) -> None:
        """Write general register r<selector>. Value masked to 8 bits."""
        if not 0 <= selector < NUM_REGISTERS:
            raise RegisterError(f"No such register: r{selector}")
        self._regs[selector] = value & 0xFF

    def snapshot(self) -> list[int]:
        """Return [ip, rp, r0, r1, r2, r3]."""
        return [self._ip, self._rp, *self._regs]

    def __repr__(self) -> str:
        regs = " ".join(f"r{i}={v:02x}" for i, v in enumerate(self._regs))
        return f"RegisterFile(ip={self._ip:04x} rp={self._rp:04x} {regs})"
