"""Virtio MMIO registers, ring structures and block-request layout."""

from __future__ import annotations

import struct
from dataclasses import dataclass, field
from typing import ClassVar

# virtio mmio control registers, offsets from the device base.
VIRTIO_MMIO_MAGIC_VALUE = 0x000
VIRTIO_MMIO_VERSION = 0x004
VIRTIO_MMIO_DEVICE_ID = 0x008
VIRTIO_MMIO_VENDOR_ID = 0x00C
VIRTIO_MMIO_DEVICE_FEATURES = 0x010
VIRTIO_MMIO_DRIVER_FEATURES = 0x020
VIRTIO_MMIO_QUEUE_SEL = 0x030
VIRTIO_MMIO_QUEUE_NUM_MAX = 0x034
VIRTIO_MMIO_QUEUE_NUM = 0x038
VIRTIO_MMIO_QUEUE_READY = 0x044
VIRTIO_MMIO_QUEUE_NOTIFY = 0x050
VIRTIO_MMIO_INTERRUPT_STATUS = 0x060
VIRTIO_MMIO_INTERRUPT_ACK = 0x064
VIRTIO_MMIO_STATUS = 0x070
VIRTIO_MMIO_QUEUE_DESC_LOW = 0x080
VIRTIO_MMIO_QUEUE_DESC_HIGH = 0x084
VIRTIO_MMIO_DRIVER_DESC_LOW = 0x090
VIRTIO_MMIO_DRIVER_DESC_HIGH = 0x094
VIRTIO_MMIO_DEVICE_DESC_LOW = 0x0A0
VIRTIO_MMIO_DEVICE_DESC_HIGH = 0x0A4

# status register bits
VIRTIO_CONFIG_S_ACKNOWLEDGE = 1
VIRTIO_CONFIG_S_DRIVER = 2
VIRTIO_CONFIG_S_DRIVER_OK = 4
VIRTIO_CONFIG_S_FEATURES_OK = 8

# device feature bits
VIRTIO_BLK_F_RO = 5
VIRTIO_BLK_F_SCSI = 7
VIRTIO_BLK_F_CONFIG_WCE = 11
VIRTIO_BLK_F_MQ = 12
VIRTIO_F_ANY_LAYOUT = 27
VIRTIO_RING_F_INDIRECT_DESC = 28
VIRTIO_RING_F_EVENT_IDX = 29

# Number of descriptors; a power of two.
NUM = 8

VRING_DESC_F_NEXT = 1
VRING_DESC_F_WRITE = 2

VIRTIO_BLK_T_IN = 0
VIRTIO_BLK_T_OUT = 1


def _pack(layout: struct.Struct, *values: int) -> bytes:
    try:
        return layout.pack(*values)
    except struct.error as exc:
        raise ValueError(str(exc)) from None


def _unpack(layout: struct.Struct, data: bytes) -> tuple:
    if len(data) != layout.size:
        raise ValueError(f"expected {layout.size} bytes, got {len(data)}")
    return layout.unpack(bytes(data))


@dataclass
class VirtqDesc:
    """One descriptor: a buffer address, its length, flags and the next index."""

    addr: int = 0
    len: int = 0
    flags: int = 0
    next: int = 0

    _LAYOUT: ClassVar[struct.Struct] = struct.Struct("<QIHH")
    SIZE: ClassVar[int] = _LAYOUT.size

    def pack(self) -> bytes:
        return _pack(self._LAYOUT, self.addr, self.len, self.flags, self.next)

    @classmethod
    def unpack(cls, data: bytes) -> "VirtqDesc":
        return cls(*_unpack(cls._LAYOUT, data))


@dataclass
class VirtqAvail:
    """The available ring: descriptor numbers of chain heads offered to the device."""

    flags: int = 0
    idx: int = 0
    ring: list[int] = field(default_factory=lambda: [0] * NUM)
    unused: int = 0

    _LAYOUT: ClassVar[struct.Struct] = struct.Struct(f"<HH{NUM}HH")
    SIZE: ClassVar[int] = _LAYOUT.size

    def __post_init__(self) -> None:
        self.ring = list(self.ring)
        if len(self.ring) != NUM:
            raise ValueError(f"avail ring must hold {NUM} entries")

    def pack(self) -> bytes:
        return _pack(self._LAYOUT, self.flags, self.idx, *self.ring, self.unused)

    @classmethod
    def unpack(cls, data: bytes) -> "VirtqAvail":
        flags, idx, *rest = _unpack(cls._LAYOUT, data)
        return cls(flags, idx, rest[:NUM], rest[NUM])


@dataclass
class VirtqUsedElem:
    """A completed request: the head descriptor index and the length written."""

    id: int = 0
    len: int = 0

    _LAYOUT: ClassVar[struct.Struct] = struct.Struct("<II")
    SIZE: ClassVar[int] = _LAYOUT.size

    def pack(self) -> bytes:
        return _pack(self._LAYOUT, self.id, self.len)

    @classmethod
    def unpack(cls, data: bytes) -> "VirtqUsedElem":
        return cls(*_unpack(cls._LAYOUT, data))


@dataclass
class VirtqUsed:
    """The used ring, through which the device reports completed requests."""

    flags: int = 0
    idx: int = 0
    ring: list[VirtqUsedElem] = field(
        default_factory=lambda: [VirtqUsedElem() for _ in range(NUM)]
    )

    _HEAD: ClassVar[struct.Struct] = struct.Struct("<HH")
    SIZE: ClassVar[int] = _HEAD.size + NUM * VirtqUsedElem.SIZE

    def __post_init__(self) -> None:
        self.ring = list(self.ring)
        if len(self.ring) != NUM:
            raise ValueError(f"used ring must hold {NUM} entries")

    def pack(self) -> bytes:
        head = _pack(self._HEAD, self.flags, self.idx)
        return head + b"".join(elem.pack() for elem in self.ring)

    @classmethod
    def unpack(cls, data: bytes) -> "VirtqUsed":
        if len(data) != cls.SIZE:
            raise ValueError(f"expected {cls.SIZE} bytes, got {len(data)}")
        flags, idx = cls._HEAD.unpack_from(bytes(data))
        start = cls._HEAD.size
        step = VirtqUsedElem.SIZE
        ring = [
            VirtqUsedElem.unpack(data[off:off + step])
            for off in range(start, cls.SIZE, step)
        ]
        return cls(flags, idx, ring)


@dataclass
class BlkRequest:
    """The first descriptor of a disk request: direction and sector."""

    type: int = VIRTIO_BLK_T_IN
    reserved: int = 0
    sector: int = 0

    _LAYOUT: ClassVar[struct.Struct] = struct.Struct("<IIQ")
    SIZE: ClassVar[int] = _LAYOUT.size

    def pack(self) -> bytes:
        return _pack(self._LAYOUT, self.type, self.reserved, self.sector)

    @classmethod
    def unpack(cls, data: bytes) -> "BlkRequest":
        return cls(*_unpack(cls._LAYOUT, data))