"""Park-Miller minimal standard pseudo-random generator."""

from __future__ import annotations

_MODULUS = 0x7FFF_FFFF


def do_rand(ctx: int) -> int:
    """Advance the generator state ``ctx`` and return the new state.

    The new state is also the random value, in the range [0, 0x7ffffffd].
    """
    x = (ctx & 0xFFFF_FFFF_FFFF_FFFF) % 0x7FFF_FFFE + 1
    hi, lo = divmod(x, 127773)
    x = 16807 * lo - 2836 * hi
    if x < 0:
        x += _MODULUS
    return x - 1


class Rand:
    """A generator holding its own state."""

    def __init__(self, seed: int = 1) -> None:
        self.state = seed

    def rand(self) -> int:
        """Return the next value and advance the state."""
        self.state = do_rand(self.state)
        return self.state

    def __iter__(self) -> "Rand":
        return self

    def __next__(self) -> int:
        return self.rand()