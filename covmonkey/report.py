# Dedicated to the public domain under CC0: https://creativecommons.org/publicdomain/zero/1.0/.

from argparse import Namespace

from .analysis import File, Stats, Verdict
from .util import RST, TXT_C, TXT_R, TXT_Y, pad_right


verdict_msgs = {
  Verdict.SOME: 'partially covered',
  Verdict.NONE: 'uncovered',
  Verdict.DEAD: 'unreachable',
}

verdict_colors = {
  Verdict.SOME: TXT_Y,
  Verdict.NONE: TXT_R,
  Verdict.DEAD: TXT_C,
}


def fmt_pct(stats: Stats, count: int) -> str:
  p = stats.fmt_percent(count)
  return p if p == 'n/a' else p + '%'


def fmt_stat(label: str, count: int, stats: Stats, verdict: Verdict|None, colorize: bool) -> str:
  color = verdict_colors[verdict] if (colorize and verdict is not None and count > 0) else ''
  rst = RST if color else ''
  return f'{label:>17}: {color}{count} ({fmt_pct(stats, count)}){rst}'


def compact_row(pct: str, name: str, stats: Stats) -> str:
  cols = [pad_right(pct, 6), pad_right(name, 32)]
  cols.extend(pad_right(n, 7) for n in (stats.lines, *stats.as_tuple()))
  return ' '.join(cols)


def report(targets: list[tuple[str,File]], args: Namespace) -> Stats:
  'Print the coverage report for each (name, file) in `targets`; return the totals.'
  totals = Stats()
  if args.compact:
    print(' ' * 47, 'Coverage'.center(28))
    print('Cover%', pad_right('Filename', 32), *(pad_right(h, 7) for h in ['Lines', 'Full', 'Partial', 'None', 'Dead']))

  for name, file in targets:
    stats = file.stats()
    totals.add(stats)
    if args.compact:
      print(compact_row(fmt_pct(stats, stats.covered), name, stats))
    elif args.percent or stats.covered == stats.lines:
      print(f'{name}: {fmt_pct(stats, stats.covered)}')
    else:
      report_file(name, file, stats, args)

  if args.compact:
    print(compact_row(fmt_pct(totals, totals.covered), 'ALL FILES', totals))
  else:
    print(f'Overall Coverage: {fmt_pct(totals, totals.covered)}')
  return totals


def report_file(name: str, file: File, stats: Stats, args: Namespace) -> None:
  colorize = args.color
  print(f'{name}: {fmt_pct(stats, stats.covered)}')
  print(f'\t{"significant lines":>17}: {stats.lines}')
  print('\t' + fmt_stat('covered', stats.covered, stats, None, colorize))
  print('\t' + fmt_stat('partially covered', stats.partial, stats, Verdict.SOME, colorize))
  print('\t' + fmt_stat('uncovered', stats.uncovered, stats, Verdict.NONE, colorize))
  print('\t' + fmt_stat('dead', stats.dead, stats, Verdict.DEAD, colorize))
  if args.list_lines:
    list_lines(file, colorize)


def list_lines(file: File, colorize: bool) -> None:
  'Print a compiler-style `path:line: message` for every line that is not fully covered.'
  for num in sorted(file.lines):
    verdict = file.lines[num].verdict()
    if verdict is None or verdict not in verdict_msgs: continue # Not executable, or fully covered.
    msg = verdict_msgs[verdict]
    if colorize:
      msg = verdict_colors[verdict] + msg + RST
    print(f'{file.name}:{num}: {msg}')
