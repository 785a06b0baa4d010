# Dedicated to the public domain under CC0: https://creativecommons.org/publicdomain/zero/1.0/.

'''
Streaming parser for opcode-count traces.

A trace is a sequence of script sections, each introduced by a header record and followed by one
instruction record per bytecode operation, giving the program counter, source line, execution count and disassembly.
Trace text may be interleaved with ordinary program output on the same stream;
the parser reports which lines it consumed so that the caller can pass the rest through.
'''

import re

from dataclasses import dataclass, field
from typing import Iterator, TextIO

from .remap import Remapper


@dataclass(frozen=True)
class Instruction:
  script: str # Name of the owning script.
  pc: int
  line: int # Source line, after remapping.
  count: int
  asm: str
  unreachable: bool # The engine proved this instruction dead.
  filename: str # Source file, after remapping.

  @property
  def key(self) -> tuple[str,int]: return (self.script, self.pc)


@dataclass
class Script:
  '''
  A script section of the trace.
  `filename` is the physical file named by the header; it is not remapped,
  because one physical file may map to several virtual files.
  The remapped file for each line is carried by its instructions.
  '''
  name: str
  filename: str
  insts: list[Instruction] = field(default_factory=list)


header_re = re.compile(r'--- SCRIPT (?P<path>.+):(?P<line>\d+) ---')
end_re = re.compile(r'--- END SCRIPT .+:\d+ ---')
inst_re = re.compile(r'''(?x)
(?P<pc> \d{5,} ) : \s+
(?P<line> \d+ ) \s+
(?: (?P<unreachable> x ) \s+ )?
\[ \s* (?P<count> \d+ ) \] \s*
(?P<asm> .* )
''')
furniture_re = re.compile(r'''(?x)
loc \s+ line \s+ op
| -+ \s+ -+ \s+ -+
| main :
''')

LineResult = tuple[str,bool] # (line, consumed).


class TraceParser:
  '''
  Push-based trace parser.
  Call `feed` once per chunk of text as it arrives, and `finish` once at end of stream.
  Chunk boundaries may fall anywhere, including inside a line.
  Completed scripts accumulate until collected with `take_scripts`.
  '''

  def __init__(self, remapper: Remapper|None = None) -> None:
    self.remapper = remapper
    self.fragment = '' # Unterminated trailing text from the previous chunk.
    self.script: Script|None = None # The currently open script.
    self.completed: list[Script] = []
    self.script_count = 0

  @property
  def is_empty(self) -> bool:
    'True if no script has been opened so far.'
    return self.script_count == 0 and self.script is None

  def feed(self, chunk: str) -> list[LineResult]:
    'Process all complete lines in `fragment + chunk`, retaining the unterminated remainder.'
    lines = (self.fragment + chunk).split('\n')
    self.fragment = lines.pop()
    return [(line, self.process_line(line)) for line in lines]

  def finish(self) -> list[LineResult]:
    'Process any remaining fragment as a complete line, and close the open script.'
    results: list[LineResult] = []
    if self.fragment:
      line = self.fragment
      self.fragment = ''
      results.append((line, self.process_line(line)))
    self.close_script()
    return results

  def take_scripts(self) -> list[Script]:
    'Return the scripts completed since the last call, in trace order.'
    scripts = self.completed
    self.completed = []
    return scripts

  def close_script(self) -> None:
    if self.script is None: return
    self.completed.append(self.script)
    self.script_count += 1
    self.script = None

  def process_line(self, line: str) -> bool:
    'Process a single line of trace text; return True if it was a trace record.'
    text = line.rstrip('\r')
    m = header_re.fullmatch(text)
    if m:
      self.close_script()
      self.script = Script(name=f'{m["path"]}:{m["line"]}', filename=m['path'])
      return True
    if self.script is None: return False # Everything else belongs to an open script.
    if end_re.fullmatch(text):
      self.close_script()
      return True
    m = inst_re.fullmatch(text)
    if m:
      self.add_inst(self.script, m)
      return True
    return bool(furniture_re.fullmatch(text))

  def add_inst(self, script: Script, m: re.Match) -> None:
    filename = script.filename
    line = int(m['line'])
    if self.remapper is not None:
      filename, line = self.remapper.remap(filename, line)
    script.insts.append(Instruction(
      script=script.name,
      pc=int(m['pc']),
      line=line,
      count=int(m['count']),
      asm=m['asm'].rstrip(),
      unreachable=bool(m['unreachable']),
      filename=filename))


def iter_chunks(stream: TextIO, size: int = 1 << 16) -> Iterator[str]:
  'Yield chunks of text from `stream` until it is exhausted.'
  while True:
    chunk = stream.read(size)
    if not chunk: return
    yield chunk
