# Dedicated to the public domain under CC0: https://creativecommons.org/publicdomain/zero/1.0/.

'''
Map physical source lines to the "virtual" file and line they represent.
Preprocessed or generated sources carry `//@line <n> "<file>"` comments;
every physical line after such a comment belongs to the named file, starting at line `n`.
'''

import re

from bisect import bisect_left
from typing import NamedTuple


class Directive(NamedTuple):
  pline: int # Physical line of the comment, 1-indexed.
  vline: int
  vfile: str


directive_re = re.compile(r'//@line (\d+) "([^"]+)"')


def scan_directives(text: str) -> list[Directive]:
  'Collect the @line directives in `text`, in ascending physical line order.'
  directives = []
  for pline, line_text in enumerate(text.split('\n'), 1):
    m = directive_re.search(line_text)
    if m:
      directives.append(Directive(pline=pline, vline=int(m[1]), vfile=m[2]))
  return directives


class Remapper:
  '''
  Resolves (path, line) pairs against the directives of each source file.
  Each file is read once, on first reference; the directive table is kept for the lifetime of the remapper,
  even if the file changes on disk.
  '''

  def __init__(self) -> None:
    self.file_directives: dict[str,list[Directive]] = {}
    self.file_plines: dict[str,list[int]] = {}
    self.last_query: tuple[str,int]|None = None
    self.last_result: tuple[str,int] = ('', 0)

  def directives(self, path: str) -> list[Directive]:
    'Return the directive table for `path`, reading the file if necessary. Raises OSError if it cannot be read.'
    try: return self.file_directives[path]
    except KeyError: pass
    with open(path, encoding='utf8', errors='replace') as f:
      directives = scan_directives(f.read())
    self.file_directives[path] = directives
    self.file_plines[path] = [d.pline for d in directives]
    return directives

  def remap(self, path: str, line: int) -> tuple[str,int]:
    'Return the (virtual file, virtual line) for physical `line` of `path`.'
    query = (path, line)
    if query == self.last_query: return self.last_result
    directives = self.directives(path)
    # Only directives strictly before the query line apply; take the closest.
    i = bisect_left(self.file_plines[path], line)
    if i == 0:
      result = query
    else:
      d = directives[i - 1]
      result = (d.vfile, line - d.pline + d.vline - 1)
    self.last_query = query
    self.last_result = result
    return result
