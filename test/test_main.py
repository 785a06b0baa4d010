from io import StringIO

import pytest

from covmonkey import main as main_module
from covmonkey.main import main


trace = '''\
--- SCRIPT {path}:1 ---
00000:   1  [   2] getgname "a"
00003:   2  [   0] setgname "b"
'''


def run(monkeypatch, *argv, stdin=''):
  monkeypatch.setattr('sys.argv', ['covmonkey', *argv])
  monkeypatch.setattr(main_module, 'stdin', StringIO(stdin))
  main()


def test_data_file(monkeypatch, capsys, tmp_path):
  data = tmp_path / 'trace.txt'
  data.write_text('noise\n' + trace.format(path='/src/a.js'))
  run(monkeypatch, '-data', str(data), '-percent', '-color-off')
  assert capsys.readouterr().out == '/src/a.js: 50.0%\nOverall Coverage: 50.0%\n'


def test_stdin_echo(monkeypatch, capsys):
  run(monkeypatch, '-percent', stdin='hello\n' + trace.format(path='a.js') + 'bye\n')
  assert capsys.readouterr().out == 'hello\nbye\na.js: 50.0%\nOverall Coverage: 50.0%\n'


def test_stdin_no_echo(monkeypatch, capsys):
  run(monkeypatch, '-percent', '-no-echo', stdin='hello\n' + trace.format(path='a.js'))
  assert capsys.readouterr().out == 'a.js: 50.0%\nOverall Coverage: 50.0%\n'


def test_basename_target(monkeypatch, capsys):
  run(monkeypatch, '-percent', '-no-echo', '-targets', '/build/out/a.js', 'zzz.js', stdin=trace.format(path='/src/a.js'))
  out, err = capsys.readouterr()
  assert out == '/src/a.js: 50.0%\nOverall Coverage: 50.0%\n'
  assert 'unknown target file: zzz.js' in err


def test_empty_trace(monkeypatch, capsys):
  with pytest.raises(SystemExit) as exc_info:
    run(monkeypatch, stdin='no trace here\n')
  assert exc_info.value.code == 0
  out = capsys.readouterr().out
  assert out.startswith('no trace here\ncovmonkey: no coverage data to process.\n')


def test_missing_data_file(monkeypatch, tmp_path):
  with pytest.raises(SystemExit) as exc_info:
    run(monkeypatch, '-data', str(tmp_path / 'missing.txt'))
  assert 'could not read trace file' in str(exc_info.value.code)


def test_at_lines_unreadable_source(monkeypatch, tmp_path):
  with pytest.raises(SystemExit) as exc_info:
    run(monkeypatch, '-at-lines', stdin=trace.format(path=str(tmp_path / 'gone.js')))
  assert '@line remapping' in str(exc_info.value.code)


def test_at_lines(monkeypatch, capsys, tmp_path):
  src = tmp_path / 'built.js'
  src.write_text('//@line 7 "orig.js"\nb = a;\n')
  run(monkeypatch, '-at-lines', '-compact', '-no-echo', stdin=trace.format(path=str(src)))
  lines = capsys.readouterr().out.splitlines()
  assert lines[2].split()[1] == str(src)[-32:].strip()
  assert lines[3].split()[1:] == ['orig.js', '1', '0', '0', '1', '0']
  assert lines[4].split()[-5:] == ['2', '1', '0', '1', '0']


def test_html_output(monkeypatch, capsys, tmp_path):
  src = tmp_path / 'a.js'
  src.write_text('a;\nb = 1;\n')
  html = tmp_path / 'out.html'
  run(monkeypatch, '-quiet', '-html', str(html), '-no-echo', stdin=trace.format(path=str(src)))
  assert html.read_text().startswith('<html>')
  assert capsys.readouterr().out == ''
  html.write_text('keep')
  run(monkeypatch, '-quiet', '-html', str(html), '-no-echo', stdin=trace.format(path=str(src)))
  assert html.read_text() == 'keep'
  assert 'exists: no HTML output written' in capsys.readouterr().out
  run(monkeypatch, '-quiet', '-force', '-html', str(html), '-no-echo', stdin=trace.format(path=str(src)))
  assert html.read_text().startswith('<html>')


def test_at_lines_non_utf8_source(monkeypatch, capsys, tmp_path):
  src = tmp_path / 'latin1.js'
  src.write_bytes(b'// caf\xe9\nb = a;\n')
  html = tmp_path / 'out.html'
  run(monkeypatch, '-at-lines', '-percent', '-no-echo', '-html', str(html), stdin=trace.format(path=str(src)))
  assert capsys.readouterr().out.endswith('Overall Coverage: 50.0%\n')
  assert 'caf�' in html.read_text(encoding='utf8')


def test_non_utf8_data_file(monkeypatch, capsys, tmp_path):
  data = tmp_path / 'trace.txt'
  data.write_bytes(b'caf\xe9\n' + trace.format(path='a.js').encode())
  run(monkeypatch, '-data', str(data), '-percent')
  assert capsys.readouterr().out == 'a.js: 50.0%\nOverall Coverage: 50.0%\n'
