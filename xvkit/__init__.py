"""Models of a small teaching kernel's memory, data formats and user tools."""

__version__ = "0.1.0"

__all__ = [
    "layout",
    "printf",
    "ulib",
    "rand",
    "vm",
    "umalloc",
    "elf",
    "virtio",
    "grep",
    "sh",
    "tools",
]