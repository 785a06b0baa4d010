# Dedicated to the public domain under CC0: https://creativecommons.org/publicdomain/zero/1.0/.

from enum import Enum
from os.path import basename
from typing import Callable, Iterable

from .remap import Remapper
from .trace import Instruction, Script, TraceParser, LineResult
from .util import errSL


class Verdict(Enum):
  FULL = 'full' # Every instruction on the line executed.
  SOME = 'some' # Some instructions executed, some did not.
  NONE = 'none' # No instruction executed.
  DEAD = 'dead' # Nothing executed, and the engine proved at least one instruction unreachable.


def line_verdict(insts: Iterable[Instruction]) -> Verdict|None:
  'Classify a line by its instructions. Returns None for a line with no instructions, which is not executable.'
  has_insts = False
  executed = False
  unexecuted = False
  unreachable = False
  for inst in insts:
    has_insts = True
    if inst.count: executed = True
    else: unexecuted = True
    if inst.unreachable: unreachable = True
  if not has_insts: return None
  if not executed: return Verdict.DEAD if unreachable else Verdict.NONE
  return Verdict.SOME if unexecuted else Verdict.FULL


def percent(count: int, total: int) -> float|None:
  'Percentage of `count` in `total`, or None when there is nothing to count.'
  if not total: return None
  return 100 * count / total


class Stats:
  'Per-verdict line counts for one file, or the sum over several.'

  def __init__(self, covered: int = 0, partial: int = 0, uncovered: int = 0, dead: int = 0) -> None:
    self.covered = covered
    self.partial = partial
    self.uncovered = uncovered
    self.dead = dead

  def __repr__(self) -> str: return f'Stats{self.as_tuple()!r}'

  def __eq__(self, r: object) -> bool:
    return isinstance(r, Stats) and self.as_tuple() == r.as_tuple()

  def as_tuple(self) -> tuple[int,int,int,int]:
    return (self.covered, self.partial, self.uncovered, self.dead)

  @property
  def lines(self) -> int:
    'The number of executable lines.'
    return self.covered + self.partial + self.uncovered + self.dead

  def add(self, stats: 'Stats') -> None:
    self.covered += stats.covered
    self.partial += stats.partial
    self.uncovered += stats.uncovered
    self.dead += stats.dead

  def count(self, verdict: Verdict) -> None:
    if verdict is Verdict.FULL: self.covered += 1
    elif verdict is Verdict.SOME: self.partial += 1
    elif verdict is Verdict.NONE: self.uncovered += 1
    elif verdict is Verdict.DEAD: self.dead += 1
    else: raise ValueError(verdict)

  def percent(self, count: int) -> float|None: return percent(count, self.lines)

  def fmt_percent(self, count: int) -> str:
    p = self.percent(count)
    return 'n/a' if p is None else f'{p:.1f}'


class Line:
  'The instructions attributed to one source line, keyed by (script, pc).'

  def __init__(self, num: int) -> None:
    self.num = num
    self.insts: dict[tuple[str,int],Instruction] = {}

  def __repr__(self) -> str: return f'Line({self.num}, insts={len(self.insts)})'

  def add(self, inst: Instruction) -> None:
    # The trace reports final counts, so a repeated key replaces the earlier record.
    self.insts[inst.key] = inst

  def verdict(self) -> Verdict|None: return line_verdict(self.insts.values())

  def counts(self) -> list[int]: return [inst.count for inst in self.insts.values()]


class File:

  def __init__(self, name: str) -> None:
    self.name = name
    self.lines: dict[int,Line] = {}

  def __repr__(self) -> str: return f'File({self.name!r})'

  def line(self, num: int) -> Line:
    'Get the line numbered `num`, creating it if necessary.'
    try: return self.lines[num]
    except KeyError: pass
    line = self.lines[num] = Line(num)
    return line

  def verdict(self, num: int) -> Verdict|None:
    try: line = self.lines[num]
    except KeyError: return None
    return line.verdict()

  def insts(self, num: int) -> list[Instruction]:
    try: return list(self.lines[num].insts.values())
    except KeyError: return []

  @property
  def executable_line_count(self) -> int:
    return sum(1 for line in self.lines.values() if line.insts)

  def stats(self) -> Stats:
    return file_stats(self)


def file_stats(file: File) -> Stats:
  'Classify every line of `file` once, and tally the verdicts of the executable lines.'
  stats = Stats()
  for line in file.lines.values():
    verdict = line.verdict()
    if verdict is not None: stats.count(verdict)
  return stats


def total_stats(files: Iterable[File]) -> Stats:
  totals = Stats()
  for file in files:
    totals.add(file_stats(file))
  return totals


NULL_SCRIPT_NAME = '(null)' # The engine reports top-level code without a file under this name.


class Coverage:
  '''
  The coverage model: maps file names to `File` objects, in the order that they were first seen.
  File names are the remapped names when remapping is enabled.
  '''

  def __init__(self) -> None:
    self.files: dict[str,File] = {}
    self.script_count = 0
    self._basename_index: dict[str,File]|None = None

  def __repr__(self) -> str: return f'Coverage(files={list(self.files)!r})'

  def file(self, name: str) -> File:
    try: return self.files[name]
    except KeyError: pass
    file = self.files[name] = File(name)
    self._basename_index = None
    return file

  def add_script(self, script: Script) -> None:
    'Fold the instructions of `script` into the model. The script itself is not retained.'
    self.script_count += 1
    for inst in script.insts:
      self.file(inst.filename).line(inst.line).add(inst)

  @property
  def basename_index(self) -> dict[str,File]:
    'Maps each base name to the first file seen with that base name.'
    if self._basename_index is None:
      index: dict[str,File] = {}
      for name, file in self.files.items():
        index.setdefault(basename(name), file)
      self._basename_index = index
    return self._basename_index

  def resolve(self, target: str) -> File|None:
    '''
    Find the file for `target`: exact name first, then base name,
    because paths given by the user may differ from traced paths in their directory prefix.
    '''
    try: return self.files[target]
    except KeyError: pass
    return self.basename_index.get(basename(target))

  def default_targets(self) -> list[str]:
    'All traced file names, sorted, excluding the top-level pseudo-file.'
    return sorted(name for name in self.files if basename(name) != NULL_SCRIPT_NAME)


def resolve_targets(coverage: Coverage, targets: list[str]) -> list[tuple[str,File]]:
  '''
  Resolve each target name to a file in `coverage`, returning (name, file) pairs using the traced name.
  Unknown targets are reported as warnings and skipped. If `targets` is empty, all traced files are used.
  '''
  if not targets:
    return [(name, coverage.files[name]) for name in coverage.default_targets()]
  resolved = []
  for target in targets:
    file = coverage.resolve(target)
    if file is None:
      errSL('covmonkey warning: unknown target file:', target)
      continue
    resolved.append((file.name, file))
  return resolved


def ingest(chunks: Iterable[str], remapper: Remapper|None = None, echo: Callable[[str],None]|None = None) -> Coverage|None:
  '''
  Parse a chunked trace, folding each script into a `Coverage` model as soon as it is complete.
  Lines that are not trace records are passed to `echo`, if provided.
  Returns None if the trace contained no scripts.
  '''
  parser = TraceParser(remapper=remapper)
  coverage = Coverage()

  def handle(results: list[LineResult]) -> None:
    if echo:
      for line, consumed in results:
        if not consumed: echo(line)
    for script in parser.take_scripts():
      coverage.add_script(script)

  for chunk in chunks:
    handle(parser.feed(chunk))
  handle(parser.finish())

  if parser.is_empty: return None
  return coverage
