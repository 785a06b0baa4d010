# Dedicated to the public domain under CC0: https://creativecommons.org/publicdomain/zero/1.0/.

import sys

from typing import Any


def errSL(*items: Any) -> None: print(*items, file=sys.stderr)


def pad_right(s: Any, width: int) -> str:
  'Right-justify `s` in a field `width` characters wide, truncating on the left.'
  s = str(s)
  return s[-width:].rjust(width)


RST = '\x1b[0m'
TXT_C = '\x1b[36m'
TXT_R = '\x1b[31m'
TXT_Y = '\x1b[33m'
