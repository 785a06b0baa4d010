# Dedicated to the public domain under CC0: https://creativecommons.org/publicdomain/zero/1.0/.

# covmonkey reads the opcode-count trace printed by a debug build of a script engine,
# and reports line coverage and dead code for the traced source files.
# The trace is read from stdin by default;
# lines of stdin that are not part of the trace are echoed to stdout.

import sys
from argparse import ArgumentParser, Namespace
from os import close as close_fd
from os.path import abspath as abs_path, exists as path_exists
from sys import stdin, stdout
from tempfile import mkstemp
from typing import Iterable

from .analysis import Coverage, File, ingest, resolve_targets
from .html_report import write_html
from .remap import Remapper
from .report import report
from .trace import iter_chunks


assert sys.version_info >= (3, 10, 0)

VERSION = '0.15'


def main() -> None:

  parser = ArgumentParser(description='covmonkey: line coverage and dead code analysis of script engine opcode traces.')
  parser.add_argument('-data', help='Read the trace from this file instead of stdin.')
  parser.add_argument('-targets', nargs='*', default=[], help='Source files to report on; defaults to all traced files.')
  parser.add_argument('-quiet', action='store_true', help='Do not print the text report.')
  parser.add_argument('-percent', action='store_true', help='Only print coverage percentages.')
  parser.add_argument('-compact', action='store_true', help='Print the report as a table.')
  parser.add_argument('-list-lines', action='store_true', help='List every line that is not fully covered.')
  parser.add_argument('-html', help='Write annotated source in HTML format to this file.')
  parser.add_argument('-force', action='store_true', help='Overwrite an existing HTML file.')
  parser.add_argument('-open', action='store_true', help='Open the HTML report in a browser; implies a temporary file if no -html path.')
  parser.add_argument('-show-ops', action='store_true', help='Include the instructions for each line in the HTML report.')
  parser.add_argument('-at-lines', action='store_true', help='Honor //@line comments in the traced sources.')
  parser.add_argument('-no-echo', dest='echo', action='store_false', help='Do not echo non-trace lines read from stdin.')
  parser.add_argument('-version', action='version', version=VERSION)
  parser.add_argument('-color-on', dest='color', action='store_true', default=stdout.isatty())
  parser.add_argument('-color-off', dest='color', action='store_false')
  args = parser.parse_args()

  coverage = read_coverage(args)
  if coverage is None:
    print('covmonkey: no coverage data to process.')
    print('covmonkey: is the script engine a debug build with opcode counts enabled?')
    exit(0)

  targets = resolve_targets(coverage, args.targets)
  if not args.quiet:
    report(targets, args)
  if args.html or args.open:
    output_html(targets, args)


def read_coverage(args: Namespace) -> Coverage|None:
  remapper = Remapper() if args.at_lines else None
  if args.data:
    try: f = open(args.data, encoding='utf8', errors='replace')
    except OSError as e:
      exit(f'covmonkey error: could not read trace file: {args.data!r}: {e.strerror}')
    with f: return ingest_or_exit(iter_chunks(f), remapper=remapper, echo=False)
  return ingest_or_exit(iter_chunks(stdin), remapper=remapper, echo=args.echo)


def ingest_or_exit(chunks: Iterable[str], remapper: Remapper|None, echo: bool) -> Coverage|None:
  try:
    return ingest(chunks, remapper=remapper, echo=(print if echo else None))
  except OSError as e:
    exit(f'covmonkey error: could not read source file for @line remapping: {e.filename!r}: {e.strerror}')


def output_html(targets: list[tuple[str,File]], args: Namespace) -> None:
  path = args.html
  if path is None: # `-open` without `-html`.
    fd, path = mkstemp(prefix='covmonkey-', suffix='.html')
    close_fd(fd)
  elif not args.force and path_exists(path):
    print(f'{path} exists: no HTML output written. Use -force to overwrite.')
    return
  try: write_html(path, targets, show_ops=args.show_ops)
  except OSError as e:
    exit(f'covmonkey error: could not generate HTML report: {e.filename!r}: {e.strerror}')
  if args.open:
    import webbrowser
    webbrowser.open('file://' + abs_path(path))


if __name__ == '__main__': main()
