# xvkit

Python models of the pieces of a small Unix-like teaching kernel and its
user programs: the physical memory layout, a three-level Sv39 page table
over simulated physical memory, a first-fit free-list allocator over a
simulated program break, the ELF and virtio block structures, a minimal
`printf`, a tiny regular-expression `grep`, the shell's command parser,
and a set of small file utilities that work on the host's files.

Everything is plain Python with no third-party dependencies.

## Installation

```
pip install .
```

For running the test suite:

```
pip install ".[test]"
pytest
```

## What is inside

| Module          | Contents |
|-----------------|----------|
| `xvkit.layout`  | Memory-layout constants and helpers (`kstack`, `plic_senable`, `plic_spriority`, `plic_sclaim`, `pg_round_up`, `pg_round_down`), `FileType`, `OpenFlag` and the `Stat` record |
| `xvkit.printf`  | `render`, `fprintf`, `printf` understanding `%d %u %x %p %s %%` and the `l`/`ll` forms; integers print as 32-bit values, hex digits in upper case |
| `xvkit.ulib`    | `atoi`, `strcmp`, `gets`, and `stat` returning a `Stat` for a host path |
| `xvkit.rand`    | The Park–Miller generator: `do_rand` and `Rand` (also iterable) |
| `xvkit.vm`      | `PhysicalMemory` (`kalloc`, `kfree`, `read`, `write`), `PageTable` (`walk`, `walkaddr`, `map_kernel`, `map_pages`, `unmap`, `load_first`, `grow`, `shrink`, `free`, `copy_to`, `clear_user`, `copyout`, `copyin`, `copyinstr`), `KernelPanic` and the PTE helpers `px`, `pa2pte`, `pte2pa`, `pte_flags` |
| `xvkit.umalloc` | `Heap` with `sbrk`, `malloc` and `free` |
| `xvkit.elf`     | `ElfHeader` and `ProgramHeader` with `parse`/`pack`, `ProgFlag`, `ElfFormatError` |
| `xvkit.virtio`  | MMIO register offsets and `VirtqDesc`, `VirtqAvail`, `VirtqUsedElem`, `VirtqUsed`, `BlkRequest` with `pack`/`unpack` |
| `xvkit.grep`    | `match`, `grep`, `main` |
| `xvkit.sh`      | `parse_cmd` building `ExecCmd`, `RedirCmd`, `PipeCmd`, `ListCmd`, `BackCmd`; `ShellSyntaxError` |
| `xvkit.tools`   | `cat`, `wc`, `fmtname`, `ls` and the command entry points |

Errors are raised as exceptions: a violated kernel invariant in the page
table raises `KernelPanic`, running out of simulated pages or heap raises
`MemoryError`, and a bad user address in `copyin`/`copyout`/`copyinstr`
raises `OSError`.

## Examples

Formatting output the way the user-space `printf` does:

```python
from xvkit.printf import render

render("%d %x %s\n", -5, 255, "ok")   # "-5 FF ok\n"
```

Matching with the small regular-expression engine (`^`, `$`, `.`, `*`):

```python
from xvkit.grep import match

match("^ab*c$", "abbbc")   # True
match("^ab*c$", "abd")     # False
```

Parsing a shell command line into a command tree:

```python
from xvkit.sh import parse_cmd, PipeCmd

tree = parse_cmd("cat README | grep the > out\n")
isinstance(tree, PipeCmd)   # True
```

Walking a simulated page table:

```python
from xvkit.vm import PhysicalMemory, PageTable

memory = PhysicalMemory(64)
table = PageTable(memory)
table.load_first(b"hello")
table.copyin(0, 5)          # b"hello"
```

Allocating from a simulated heap:

```python
from xvkit.umalloc import Heap

heap = Heap(1 << 20)
addr = heap.malloc(100)
heap.free(addr)
```

Reproducible pseudo-random numbers:

```python
from xvkit.rand import Rand

Rand(1).rand()   # 33613
```

## Command-line tools

Installing the package provides small versions of the classic utilities:

```
xvkit-cat FILE...
xvkit-echo WORDS...
xvkit-wc FILE...
xvkit-grep PATTERN [FILE...]
xvkit-ls [PATH...]
xvkit-ln OLD NEW
xvkit-mkdir DIR...
xvkit-rm FILE...
xvkit-kill PID...
```

With no file arguments, `xvkit-cat`, `xvkit-wc` and `xvkit-grep` read
standard input. `xvkit-grep` only examines newline-terminated lines.
`xvkit-ls` without arguments lists the current directory, printing each
entry's name padded to fourteen characters, its type, inode number and
size. `xvkit-mkdir` and `xvkit-rm` stop at the first failure.
`xvkit-kill` sends a kill signal to each host process id given.

## What it does not do

There is no running kernel here: no scheduler, no processes, no system
calls and no on-disk file system. The page table and heap work only on
their own simulated memory. The shell module parses command lines into
trees but does not run them, and there is no interactive shell command.
The file utilities act on the host's own files and processes.