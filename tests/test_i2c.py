import pytest

from micromouse.i2c import (
    BUFFER_SIZE,
    I2CDevice,
    I2CError,
    I2CMaster,
    I2CState,
    SimulatedBus,
    Transaction,
)

ADDR = 0x68


@pytest.fixture
def device():
    return I2CDevice()


@pytest.fixture
def bus(device):
    b = SimulatedBus()
    b.attach(ADDR, device)
    return b


@pytest.fixture
def master(bus):
    return I2CMaster(bus)


def test_device_write_then_read_round_trip():
    dev = I2CDevice()
    dev.write(bytes([0x10, 1, 2, 3]))
    dev.write(bytes([0x10]))
    assert dev.read(3) == bytes([1, 2, 3])


def test_device_pointer_wraps():
    dev = I2CDevice(registers=bytearray(4))
    dev.write(bytes([3, 9, 8]))
    assert dev.registers == bytearray([8, 0, 0, 9])


def test_device_rejects_negative_read():
    with pytest.raises(ValueError):
        I2CDevice().read(-1)


def test_bus_nacks_missing_device(bus):
    assert bus.address(0x11, read=False) is False
    assert bus.address(ADDR, read=True) is True


def test_bus_absent_device_reads_idle_level(bus):
    assert bus.read_byte(0x11) == 0xFF


def test_bus_attach_twice_raises(bus, device):
    with pytest.raises(ValueError):
        bus.attach(ADDR, device)


def test_bus_address_range():
    with pytest.raises(ValueError):
        SimulatedBus().attach(0x80, I2CDevice())


def test_transfer_write_then_read(master, device):
    assert master.transfer(ADDR, bytes([0x20, 0xAB, 0xCD])) == b""
    assert device.registers[0x20:0x22] == bytearray([0xAB, 0xCD])
    assert master.transfer(ADDR, bytes([0x20]), 2) == bytes([0xAB, 0xCD])
    assert not master.busy()


def test_transfer_pure_read_continues_from_pointer(master, device):
    device.registers[5:8] = bytes([7, 8, 9])
    master.transfer(ADDR, bytes([5]))
    assert master.transfer(ADDR, b"", 3) == bytes([7, 8, 9])


def test_transfer_to_missing_device_raises(master):
    with pytest.raises(I2CError) as info:
        master.transfer(0x22, bytes([1]), 1)
    assert info.value.address == 0x22


def test_empty_transfer_succeeds_immediately(master):
    calls = []
    t = master.submit(ADDR, b"", 0, calls.append)
    assert calls == [True]
    assert t.state is I2CState.DONE
    assert not master.busy()
    assert master.transfer(ADDR) == b""


def test_write_state_sequence(master):
    calls = []
    t = master.submit(ADDR, bytes([1, 2]), 0, calls.append)
    assert t.state is I2CState.START
    seen = []
    for _ in range(5):
        master.service()
        seen.append(t.state)
    assert seen == [
        I2CState.SEND_ADDRESS,
        I2CState.SEND_DATA,
        I2CState.SEND_DATA,
        I2CState.STOP,
        I2CState.DONE,
    ]
    assert calls == []
    master.service()
    assert calls == [True]
    assert not master.busy()


def test_read_passes_through_restart(master):
    t = master.submit(ADDR, bytes([0]), 1)
    states = []
    while master.busy():
        master.service()
        states.append(t.state)
    assert I2CState.RESTART in states
    assert I2CState.READ_DATA in states
    assert states.index(I2CState.RESTART) < states.index(I2CState.READ_DATA)


def test_failure_callback_and_queue_continues(master, device):
    results = []
    master.submit(0x22, bytes([1]), 0, lambda ok: results.append(("bad", ok)))
    good = master.submit(ADDR, bytes([0x30, 5]), 0, lambda ok: results.append(("good", ok)))
    assert master.pending() == 1
    while master.busy():
        master.service()
    assert results == [("bad", False), ("good", True)]
    assert good.state is I2CState.DONE
    assert device.registers[0x30] == 5


def test_transactions_run_in_submission_order(master, device):
    order = []
    for value in range(4):
        master.submit(ADDR, bytes([0x40, value]), 0, lambda ok, v=value: order.append(v))
    while master.busy():
        master.service()
    assert order == [0, 1, 2, 3]
    assert device.registers[0x40] == 3


def test_full_buffer_drains_before_queueing(bus, device):
    m = I2CMaster(bus, buffer_size=2)
    done = []
    for value in range(5):
        m.submit(ADDR, bytes([value, value]), 0, lambda ok, v=value: done.append(v))
        assert m.pending() <= 2
    while m.busy():
        m.service()
    assert done == [0, 1, 2, 3, 4]
    assert list(device.registers[0:5]) == [0, 1, 2, 3, 4]


def test_default_buffer_size(bus):
    assert I2CMaster(bus).buffer_size == BUFFER_SIZE


def test_invalid_arguments(master, bus):
    with pytest.raises(ValueError):
        master.submit(ADDR, b"", -1)
    with pytest.raises(ValueError):
        master.submit(200, b"\x01")
    with pytest.raises(ValueError):
        I2CMaster(bus, buffer_size=0)


def test_service_when_idle_does_nothing(master):
    master.service()
    assert not master.busy()
    assert master.pending() == 0


def test_transaction_defaults():
    t = Transaction(ADDR)
    assert t.state is I2CState.IDLE
    assert t.write_index == 0
    assert t.received == bytearray()