"""Queued, interrupt-driven I2C master running over a simulated bus."""

from __future__ import annotations

from collections import deque
from collections.abc import Callable
from dataclasses import dataclass, field
from enum import Enum, auto

BUFFER_SIZE = 32
REGISTER_COUNT = 256
IDLE_BUS_BYTE = 0xFF

Callback = Callable[[bool], None]


class I2CState(Enum):
    """Stages of one transaction on the bus."""

    IDLE = auto()
    START = auto()
    SEND_ADDRESS = auto()
    SEND_DATA = auto()
    RESTART = auto()
    SEND_ADDRESS_R = auto()
    READ_DATA = auto()
    STOP = auto()
    DONE = auto()
    ERROR = auto()


class I2CError(Exception):
    """A transaction was not acknowledged by the addressed device."""

    def __init__(self, address: int) -> None:
        super().__init__(f"I2C transaction to address 0x{address:02X} failed")
        self.address = address


def _check_address(address: int) -> None:
    if not 0 <= address <= 0x7F:
        raise ValueError(f"7-bit I2C address out of range: {address}")


@dataclass
class I2CDevice:
    """A register-file device: the first written byte selects a register,
    following bytes are stored from there on, reads continue from the pointer.
    """

    registers: bytearray = field(default_factory=lambda: bytearray(REGISTER_COUNT))
    pointer: int = 0

    def write(self, data: bytes) -> None:
        """Receive the bytes of one write phase."""
        if not data:
            return
        size = len(self.registers)
        self.pointer = data[0] % size
        for value in data[1:]:
            self.registers[self.pointer] = value
            self.pointer = (self.pointer + 1) % size

    def read(self, count: int) -> bytes:
        """Return ``count`` bytes starting at the register pointer."""
        if count < 0:
            raise ValueError(f"cannot read a negative number of bytes: {count}")
        size = len(self.registers)
        out = bytearray()
        for _ in range(count):
            out.append(self.registers[self.pointer])
            self.pointer = (self.pointer + 1) % size
        return bytes(out)


class SimulatedBus:
    """A bus of devices keyed by 7-bit address; absent devices do not acknowledge."""

    def __init__(self) -> None:
        self.devices: dict[int, I2CDevice] = {}
        self._phase: tuple[int, bytearray] | None = None

    def attach(self, address: int, device: I2CDevice) -> None:
        """Connect a device at the given address."""
        _check_address(address)
        if address in self.devices:
            raise ValueError(f"address 0x{address:02X} is already in use")
        self.devices[address] = device

    def _stop(self) -> None:
        if self._phase is not None:
            address, buffer = self._phase
            self._phase = None
            self.devices[address].write(bytes(buffer))

    def address(self, address: int, read: bool) -> bool:
        """Send an address byte; returns whether a device acknowledged it."""
        _check_address(address)
        self._stop()
        if address not in self.devices:
            return False
        if not read:
            self._phase = (address, bytearray())
        return True

    def write_byte(self, address: int, value: int) -> bool:
        """Send one data byte in the current write phase; returns the acknowledge."""
        if not 0 <= value <= 0xFF:
            raise ValueError(f"byte value out of range: {value}")
        if self._phase is None or self._phase[0] != address:
            return False
        self._phase[1].append(value)
        return True

    def read_byte(self, address: int) -> int:
        """Clock in one byte from a device; an absent device reads as 0xFF."""
        self._stop()
        device = self.devices.get(address)
        if device is None:
            return IDLE_BUS_BYTE
        return device.read(1)[0]


@dataclass
class Transaction:
    """One queued write-then-read exchange with a device."""

    address: int
    data: bytes = b""
    read_length: int = 0
    callback: Callback | None = None
    state: I2CState = I2CState.IDLE
    write_index: int = 0
    received: bytearray = field(default_factory=bytearray)


class I2CMaster:
    """Runs transactions one at a time; each ``service`` call is one interrupt."""

    def __init__(self, bus: SimulatedBus, buffer_size: int = BUFFER_SIZE) -> None:
        if buffer_size < 1:
            raise ValueError(f"buffer size must be positive, got {buffer_size}")
        self.bus = bus
        self.buffer_size = buffer_size
        self._queue: deque[Transaction] = deque()
        self._current: Transaction | None = None
        self._ack = False

    def busy(self) -> bool:
        """Whether a transaction is in progress."""
        return self._current is not None

    def pending(self) -> int:
        """Number of queued transactions not yet started."""
        return len(self._queue)

    def _start_next(self) -> None:
        if not self._queue:
            self._current = None
            return
        self._current = self._queue.popleft()
        self._current.state = I2CState.START

    def submit(
        self,
        address: int,
        data: bytes = b"",
        read_length: int = 0,
        callback: Callback | None = None,
    ) -> Transaction:
        """Queue a transaction; while the queue is full, run the bus until it has room."""
        _check_address(address)
        if read_length < 0:
            raise ValueError(f"read length must not be negative: {read_length}")
        data = bytes(data)
        while len(self._queue) >= self.buffer_size:
            self.service()

        transaction = Transaction(address, data, read_length, callback)
        if not data and read_length == 0:
            transaction.state = I2CState.DONE
            if callback is not None:
                callback(True)
            return transaction

        self._queue.append(transaction)
        if self._current is None:
            self._start_next()
        return transaction

    def service(self) -> None:
        """Advance the current transaction by one step."""
        t = self._current
        if t is None:
            return
        bus = self.bus
        state = t.state

        if state is I2CState.START:
            if t.data:
                t.state = I2CState.SEND_ADDRESS
                self._ack = bus.address(t.address, read=False)
            else:
                t.state = I2CState.SEND_ADDRESS_R
                self._ack = bus.address(t.address, read=True)
        elif state is I2CState.SEND_ADDRESS:
            if not self._ack:
                t.state = I2CState.ERROR
            else:
                t.state = I2CState.SEND_DATA
                self._send_next_byte(t)
        elif state is I2CState.SEND_DATA:
            if not self._ack:
                t.state = I2CState.ERROR
            elif t.write_index < len(t.data):
                self._send_next_byte(t)
            elif t.read_length > 0:
                t.state = I2CState.RESTART
            else:
                t.state = I2CState.STOP
                bus._stop()
        elif state is I2CState.RESTART:
            t.state = I2CState.SEND_ADDRESS_R
            self._ack = bus.address(t.address, read=True)
        elif state is I2CState.SEND_ADDRESS_R:
            t.state = I2CState.READ_DATA if self._ack else I2CState.ERROR
        elif state is I2CState.READ_DATA:
            t.received.append(bus.read_byte(t.address))
            if len(t.received) >= t.read_length:
                t.state = I2CState.STOP
                bus._stop()
        elif state is I2CState.STOP:
            t.state = I2CState.DONE
        elif state is I2CState.DONE:
            self._finish(t, True)
        elif state is I2CState.ERROR:
            bus._stop()
            self._finish(t, False)

    def _send_next_byte(self, t: Transaction) -> None:
        self._ack = self.bus.write_byte(t.address, t.data[t.write_index])
        t.write_index += 1

    def _finish(self, t: Transaction, success: bool) -> None:
        if t.callback is not None:
            t.callback(success)
        self._start_next()

    def transfer(self, address: int, data: bytes = b"", read_length: int = 0) -> bytes:
        """Run a transaction to completion and return the bytes read.

        Raises I2CError when the device does not acknowledge.
        """
        outcome: list[bool] = []
        transaction = self.submit(address, data, read_length, outcome.append)
        while self.busy():
            self.service()
        if not outcome or not outcome[-1]:
            raise I2CError(address)
        return bytes(transaction.received)