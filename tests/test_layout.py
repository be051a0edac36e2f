import pytest

from xvkit.layout import (
    KERNBASE,
    MAXVA,
    PGSIZE,
    PHYSTOP,
    PLIC,
    TRAMPOLINE,
    TRAPFRAME,
    UART0,
    FileType,
    OpenFlag,
    Stat,
    kstack,
    pg_round_down,
    pg_round_up,
    plic_sclaim,
    plic_senable,
    plic_spriority,
)


def test_trampoline_and_trapframe_addresses():
    assert TRAMPOLINE == 0x3FFFFFF000
    assert TRAPFRAME == 0x3FFFFFE000
    assert MAXVA == 0x4000000000
    assert pg_round_down(MAXVA - 1) == TRAMPOLINE
    assert kstack(0) == 0x3FFFFFD000
    assert pg_round_up(TRAPFRAME + 1) == TRAMPOLINE


def test_device_addresses():
    assert UART0 == 0x10000000
    assert KERNBASE == 0x80000000
    assert PHYSTOP > KERNBASE
    assert pg_round_down(UART0) == UART0
    assert pg_round_up(PHYSTOP) == PHYSTOP
    assert plic_senable(0) == 0x0C002080
    assert plic_spriority(0) == 0x0C201000
    assert plic_sclaim(0) == 0x0C201004


@pytest.mark.parametrize("p", [0, 1, 5, 63])
def test_kstacks_are_separated_by_guard_pages(p):
    assert kstack(p) - kstack(p + 1) == 2 * PGSIZE
    assert kstack(p) < TRAMPOLINE
    assert kstack(p) % PGSIZE == 0


@pytest.mark.parametrize("hart", [0, 1, 7])
def test_plic_registers(hart):
    assert plic_senable(hart + 1) - plic_senable(hart) == 0x100
    assert plic_sclaim(hart) - plic_spriority(hart) == 4
    assert plic_spriority(hart + 1) - plic_spriority(hart) == 0x2000
    assert plic_senable(hart) > PLIC


@pytest.mark.parametrize("sz", [0, 1, 4095, 4096, 4097, 123456])
def test_round_up(sz):
    r = pg_round_up(sz)
    assert r % PGSIZE == 0
    assert sz <= r < sz + PGSIZE


@pytest.mark.parametrize("a", [0, 1, 4095, 4096, 4097, 123456])
def test_round_down(a):
    r = pg_round_down(a)
    assert r % PGSIZE == 0
    assert a - PGSIZE < r <= a


def test_round_down_example():
    assert pg_round_down(4097) == 4096
    assert pg_round_up(4097) == 2 * 4096


def test_open_flags_combine():
    flags = OpenFlag(0x601)
    assert flags == OpenFlag.WRONLY | OpenFlag.CREATE | OpenFlag.TRUNC
    assert OpenFlag.CREATE in flags
    assert OpenFlag.RDWR not in flags
    assert OpenFlag(0x200) is OpenFlag.CREATE
    assert int(OpenFlag(0)) == 0


def test_file_types_and_stat():
    st = Stat(dev=1, ino=2, type=FileType.DIR, nlink=1, size=64)
    assert st.type is FileType.DIR
    assert FileType(3) is FileType.DEVICE
    with pytest.raises(AttributeError):
        st.size = 3  # type: ignore[misc]