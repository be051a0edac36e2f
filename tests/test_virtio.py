import pytest

from xvkit.virtio import (
    NUM,
    VIRTIO_BLK_T_OUT,
    VRING_DESC_F_NEXT,
    VRING_DESC_F_WRITE,
    BlkRequest,
    VirtqAvail,
    VirtqDesc,
    VirtqUsed,
    VirtqUsedElem,
)


def test_desc_round_trip():
    d = VirtqDesc(addr=0x8000_1000, len=512, flags=VRING_DESC_F_NEXT | VRING_DESC_F_WRITE, next=3)
    assert VirtqDesc.unpack(d.pack()) == d


def test_desc_field_order():
    d = VirtqDesc(addr=0x1122334455667788, len=0xAABBCCDD, flags=VRING_DESC_F_NEXT, next=5)
    raw = d.pack()
    assert raw[:8] == (0x1122334455667788).to_bytes(8, "little")
    assert raw[8:12] == (0xAABBCCDD).to_bytes(4, "little")
    assert len(raw) == VirtqDesc.SIZE


def test_desc_wrong_length():
    with pytest.raises(ValueError):
        VirtqDesc.unpack(bytes(VirtqDesc.SIZE - 1))


def test_desc_out_of_range():
    with pytest.raises(ValueError):
        VirtqDesc(next=1 << 16).pack()


def test_avail_round_trip():
    a = VirtqAvail(flags=0, idx=7, ring=list(range(NUM)), unused=0)
    raw = a.pack()
    assert len(raw) == VirtqAvail.SIZE
    assert VirtqAvail.unpack(raw) == a


def test_avail_ring_length_checked():
    with pytest.raises(ValueError):
        VirtqAvail(ring=[0] * (NUM - 1))


def test_used_elem_round_trip():
    e = VirtqUsedElem(id=4, len=1)
    assert VirtqUsedElem.unpack(e.pack()) == e


def test_used_round_trip():
    u = VirtqUsed(idx=9, ring=[VirtqUsedElem(id=i, len=i * 2) for i in range(NUM)])
    raw = u.pack()
    assert len(raw) == VirtqUsed.SIZE
    assert VirtqUsed.unpack(raw) == u


def test_used_ring_length_checked():
    with pytest.raises(ValueError):
        VirtqUsed(ring=[VirtqUsedElem()])


def test_used_wrong_length():
    with pytest.raises(ValueError):
        VirtqUsed.unpack(bytes(VirtqUsed.SIZE + 1))


def test_blk_request_round_trip():
    r = BlkRequest(type=VIRTIO_BLK_T_OUT, sector=42)
    raw = r.pack()
    assert raw[:4] == VIRTIO_BLK_T_OUT.to_bytes(4, "little")
    assert BlkRequest.unpack(raw) == r