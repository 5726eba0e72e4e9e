# pdp10tools

Tools for working with PDP-10 programs and data: core images in several
loader formats, paper tape loaders, plotter files and cpio archives on tape
images. Memory is held as 36-bit words in a sparse `Memory` object, and each
format module reads into it or produces the words or text to write it back
out.

Words are plain Python integers. The readers take any iterable of words and
the writers return lists of words (or strings, for the text formats).

## Installation

```
pip install .
```

For running the tests:

```
pip install .[test]
pytest
```

## What is in the package

- `pdp10tools.memory`: `Memory`, a sparse address space made of sorted
  `Area` blocks, each pure (read-only) or impure. `add` merges new words into
  an adjoining impure area and raises `OverlapError` if the address is
  already occupied; `remove` and `purify` split areas as needed; `get`,
  `set` and `is_pure` work on single addresses; `seek` and `next_word` walk
  through memory in address order.
- `pdp10tools.symbols`: `SymbolTable` with lookup by name (`by_name`,
  `value_of`) and by value (`by_value`). When several symbols share a value,
  a `Hint` picks the best-suited one; the table's `SymbolMode` (`NONE`,
  `DDT`, `ALL`, parsed by `parse_symbols_mode`) controls which symbols are
  returned by value. Symbols carry `SymbolFlag` bits (global, half killed,
  killed).
- `pdp10tools.words`: `WordStream`, which wraps an iterable of words and
  reports the end as `None`, and raw core images (`read_raw`, `read_raw_at`,
  `write_raw`, `write_raw_at`).
- `pdp10tools.sblk`: ITS SBLK files, with checksummed blocks of at most 512
  words and a symbol table in SQUOZE (`read_sblk`, `write_sblk`,
  `write_sblk_core`, `write_sblk_symbols`, `write_block`,
  `ascii_to_squoze`).
- `pdp10tools.pdump`: ITS PDUMP files (`read_pdump`, `write_pdump`,
  `page_present`). Read-only pages are loaded as pure memory.
- `pdp10tools.rim10`: paper tapes with a RIM10 or RIM10B hardware read-in
  loader. `read_rim10` runs the loader in a small emulator to load the tape;
  `write_rim10` writes a tape with the MIDAS RIM10 loader.
- `pdp10tools.mdl`: saved Muddle interpreter images in the fast save format
  (`read_mdl`, `define_mdl_symbols`, `word_to_ascii7`). Interpreter
  versions 54, 56, 104, 105 and 106 are known.
- `pdp10tools.palx_format`: PDP-11 absolute loader files made by PALX
  (`read_palx`, `write_palx`), one byte per word.
- `pdp10tools.palxconv`: conversion of PALX output to an absolute loader
  tape or a flat memory image (`convert` with `OutputMode.ABSOLUTE` or
  `OutputMode.IMAGE`), and a listing of the symbol table that follows it
  (`read_symbol_table`).
- `pdp10tools.odt`: core images as ODT deposit commands (`write_odt`,
  `read_odt`).
- `pdp10tools.simh`: core images as SIMH `d` and `go` commands
  (`write_simh`, `read_simh`); bad lines raise `SimhError`.
- `pdp10tools.plt`, `pdp10tools.svg`: plotter files turned into SVG
  polylines and text (`plt_to_svg`, `SvgWriter`, `escape_character`).
- `pdp10tools.oldcpio`: listing and extraction of old binary or ASCII cpio
  archives stored in SIMH tape images (`CpioReader`, `read_archive`, and the
  `main` function behind the command below).

Readers that report progress write to a text stream given as `out`, or to
standard output by default. Malformed input raises an exception specific to
the format (`SblkError`, `PalxError`, `Rim10Error`, `MdlError`, `PltError`,
`PalxConvertError`, `TapeImageError`).

## Example

```python
from pdp10tools.memory import Memory
from pdp10tools.simh import write_simh

memory = Memory()
memory.add(0o100, [0o254000000100])
print(write_simh(memory, 0o254000000100), end="")
```

prints

```
d 000100 254000000100
go 000100
```

## Command line

List the files in a cpio archive on a SIMH tape image read from standard
input:

```
pdp10-old-cpio < tape.tap
```

Add `-x` to extract the files into the current directory. A leading `/` is
dropped from member names, directories are created as needed and each file
gets the modification time stored in the archive.

```
pdp10-old-cpio -x < tape.tap
```

## What the package does not do

- It does not decode 36-bit words from files on disk in any of the packing
  schemes used for PDP-10 data; words must already be Python integers.
- It has no disassembler, and the cpio lister is its only command. The other
  formats are used from Python.