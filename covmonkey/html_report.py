# Dedicated to the public domain under CC0: https://creativecommons.org/publicdomain/zero/1.0/.

'Annotated HTML coverage report.'

from html import escape
from math import log
from typing import Iterator

from .analysis import File, Line, Stats, Verdict


style = '''\
.line {white-space: pre; font-family: monospace; font-weight: bold; padding: 1px;}
.full {background-color: #fff}
.none {background-color: #faa}
.some {background-color: #ffa}
.dead {background-color: #fca}
.p0 {color: #000;}
.p1 {color: #200;}
.p2 {color: #400;}
.p3 {color: #600;}
.p4 {color: #800;}
.p5 {color: #a00;}
.p6 {color: #c00;}
.p7 {color: #e00;}
.p8 {color: #f00;}
.p9 {color: #f00;}
table {border-collapse: collapse;}
td, th {border: solid black 1px; padding: 3px 5px 3px 5px;}
th {background-color: rgba(0,0,0,0.1)}
.num {float: left; font-weight: bold; text-align: right; margin-right: 1%; width: 4%; text-decoration: none; color: inherit;}
.type {float: right; font-weight: bold; font-size: smaller; text-align: left; margin-left: 1%; width: 9%;}
.ops {margin-left: 5%; padding-left: 10px;}
.hidden {display: none;}
'''

# Clicking a line toggles its instruction table.
script = '''\
document.addEventListener("click", function(e) {
  if (e.target.classList.contains("num")) return;
  for (var elt = e.target; elt; elt = elt.parentNode) {
    if (elt.classList && elt.classList.contains("line")) {
      var ops = elt.getElementsByTagName("table")[0];
      if (ops) ops.classList.toggle("hidden");
      return;
    }
  }
}, true);
'''


def heat(line: Line, max_count: int) -> int:
  'Execution-count heat class 0-9 for `line`, on a log scale relative to the hottest line of the file.'
  count = max(line.counts(), default=0)
  if count <= 0 or max_count <= 1: return 0
  return min(9, int(10 * log(1 + count) / log(1 + max_count)))


def render_html(targets: list[tuple[str,File]], show_ops: bool) -> Iterator[str]:
  '''
  Yield the HTML report for `targets` as a sequence of text fragments.
  The source of each target is read from disk; raises OSError if it cannot be read.
  '''
  yield '<html><head>\n<title>covmonkey code coverage</title>\n'
  yield f'<style type="text/css">\n{style}</style>\n<script>\n{script}</script>\n'
  yield '</head>\n<body>\n<h1>covmonkey code coverage</h1>\n'

  yield '<table>\n<tr><th>Source File<th>Executable Lines<th>Covered<th>Partial<th>Uncovered<th>Dead</tr>\n'
  for name, file in targets:
    stats = file.stats()
    cells = ''.join(f'<td>{n} ({fmt_pct(stats, n)})' for n in stats.as_tuple())
    yield f'<tr><td><a href="#{escape(name)}">{escape(name)}</a><td>{stats.lines}{cells}</tr>\n'
  yield '</table>\n'

  for name, file in targets:
    yield from render_file(name, file, show_ops)
  yield '</body>\n</html>\n'


def fmt_pct(stats: Stats, count: int) -> str:
  p = stats.percent(count)
  return 'n/a' if p is None else f'{p:.0f}%'


def render_file(name: str, file: File, show_ops: bool) -> Iterator[str]:
  with open(name, encoding='utf8', errors='replace') as f:
    src_lines = f.read().split('\n')
  max_count = max((max(line.counts(), default=0) for line in file.lines.values()), default=0)
  ename = escape(name)
  yield f'<a name="{ename}"><h2>{ename}</h2></a>\n'
  for num, text in enumerate(src_lines, 1):
    line = file.lines.get(num)
    verdict = line.verdict() if line else None
    classes = ['line']
    annotation = ''
    if line and verdict:
      classes.append(verdict.value)
      classes.append(f'p{heat(line, max_count)}')
      if verdict is Verdict.FULL:
        annotation = '// ' + ','.join(str(c) for c in line.counts())
      else:
        annotation = '// ' + verdict.value
    anchor = f'{ename}:{num}'
    yield (f'<div id="{anchor}" class="{" ".join(classes)}"><a href="#{anchor}" class="num">{num}</a>'
      f'<span class="type">{annotation}</span>{escape(text) or " "}')
    if show_ops and line:
      yield '<table class="ops hidden"><tr><th>Script<th>PC<th>#<th>Instruction</tr>'
      for inst in line.insts.values():
        yield f'<tr><td>{escape(inst.script)}<td>{inst.pc}<td>{inst.count}<td>{escape(inst.asm)}</tr>'
      yield '</table>'
    yield '</div>\n'


def write_html(path: str, targets: list[tuple[str,File]], show_ops: bool) -> None:
  'Render the report for `targets` and write it to `path`. Nothing is written if a source file cannot be read.'
  text = ''.join(render_html(targets, show_ops))
  with open(path, 'w', encoding='utf8') as f:
    f.write(text)
