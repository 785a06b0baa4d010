import pytest

from covmonkey.remap import Directive, Remapper, scan_directives


src = '''\
var a = 1;
//@line 10 "gen/one.js"
var b = 2;
var c = 3;
//@line 100 "gen/two.js"
var d = 4;
'''


@pytest.fixture
def src_path(tmp_path):
  path = tmp_path / 'src.js'
  path.write_text(src)
  return str(path)


def test_scan_directives():
  assert scan_directives(src) == [
    Directive(pline=2, vline=10, vfile='gen/one.js'),
    Directive(pline=5, vline=100, vfile='gen/two.js'),
  ]


def test_scan_directive_anywhere_on_line():
  assert scan_directives('foo(); //@line 7 "x.js" trailing') == [Directive(1, 7, 'x.js')]


def test_identity_before_first_directive(src_path):
  r = Remapper()
  assert r.remap(src_path, 1) == (src_path, 1)
  # A directive only applies to the lines after it.
  assert r.remap(src_path, 2) == (src_path, 2)


def test_line_after_directive(src_path):
  r = Remapper()
  assert r.remap(src_path, 3) == ('gen/one.js', 10)
  assert r.remap(src_path, 4) == ('gen/one.js', 11)
  assert r.remap(src_path, 5) == ('gen/one.js', 12)
  assert r.remap(src_path, 6) == ('gen/two.js', 100)


def test_non_monotonic_queries(src_path):
  r = Remapper()
  expected = {n: r.remap(src_path, n) for n in range(1, 8)}
  for n in [6, 1, 3, 3, 7, 2, 4, 1, 5]:
    assert r.remap(src_path, n) == expected[n]


def test_file_read_once(src_path, tmp_path):
  r = Remapper()
  assert r.remap(src_path, 3) == ('gen/one.js', 10)
  (tmp_path / 'src.js').write_text('no directives\n' * 10)
  assert r.remap(src_path, 4) == ('gen/one.js', 11)


def test_no_directives(tmp_path):
  path = tmp_path / 'plain.js'
  path.write_text('var a;\nvar b;\n')
  r = Remapper()
  assert r.remap(str(path), 2) == (str(path), 2)
  assert r.directives(str(path)) == []


def test_unreadable_file_raises(tmp_path):
  r = Remapper()
  with pytest.raises(OSError):
    r.remap(str(tmp_path / 'missing.js'), 1)


def test_repeated_query_is_memoized(src_path):
  r = Remapper()
  assert r.remap(src_path, 4) == ('gen/one.js', 11)
  r.file_plines.clear()
  r.file_directives.clear()
  assert r.remap(src_path, 4) == ('gen/one.js', 11)
  assert r.file_plines == {} # The directive table was not consulted again.


def test_non_utf8_source(tmp_path):
  path = tmp_path / 'latin1.js'
  path.write_bytes(b'// caf\xe9\n//@line 3 "orig.js"\nvar a;\n')
  r = Remapper()
  assert r.remap(str(path), 3) == ('orig.js', 3)
