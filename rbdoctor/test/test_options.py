from io import StringIO
from pathlib import Path

import pytest

from rbdoctor.options import RbdoctorConfigParser, Options
from rbdoctor._configparser import get_toml_section

from . import MonkeyPatch

EXAMPLE_TOML_CONF = """
[tool.poetry]
name = "awesome"

[tool.rbdoctor]
line-numbers = true
class-prefix = "rb-"
output = "api/source.html"
"""

EXAMPLE_INI_CONF = """
[metadata]
name = awesome

[tool:rbdoctor]
line-numbers = true
class-prefix = rb-
"""

def test_config_parsers_toml() -> None:
    data = RbdoctorConfigParser.parse(StringIO(EXAMPLE_TOML_CONF))
    assert dict(data) == {'line-numbers': 'true', 'class-prefix': 'rb-', 'output': 'api/source.html'}

def test_config_parsers_ini() -> None:
    data = RbdoctorConfigParser.parse(StringIO(EXAMPLE_INI_CONF))
    assert dict(data) == {'line-numbers': 'true', 'class-prefix': 'rb-'}

def test_config_parsers_ini_list() -> None:
    data = RbdoctorConfigParser.parse(StringIO("[tool:rbdoctor]\nclass-prefix = rb-\nitems = ['a', 2]\n"))
    assert dict(data) == {'class-prefix': 'rb-', 'items': ['a', '2']}

def test_config_parsers_no_section() -> None:
    assert dict(RbdoctorConfigParser.parse(StringIO('[tool.other]\nx = 1\n'))) == {}

def test_get_toml_section() -> None:
    data = {'tool': {'rbdoctor': {'pre': True}, 'flat': 1}}
    assert get_toml_section(data, 'tool.rbdoctor') == {'pre': True}
    assert get_toml_section(data, 'tool.flat') is None
    assert get_toml_section(data, 'tool.flat.deeper') is None
    assert get_toml_section(data, 'other') is None

def test_defaults(monkeypatch: MonkeyPatch, tmp_path: Path) -> None:
    monkeypatch.chdir(tmp_path)
    options = Options.defaults()
    assert options.tokenfiles == []
    assert options.output is None
    assert options.linenumbers is False
    assert options.nodedent is False
    assert options.pre is False
    assert options.classprefix == 'ruby-'
    assert options.verbosity == 0

def test_verbosity(monkeypatch: MonkeyPatch, tmp_path: Path) -> None:
    monkeypatch.chdir(tmp_path)
    assert Options.from_args(['-vv']).verbosity == 2
    assert Options.from_args(['-v', '-qq']).verbosity == -1

def test_paths_are_absolute(monkeypatch: MonkeyPatch, tmp_path: Path) -> None:
    monkeypatch.chdir(tmp_path)
    options = Options.from_args(['-o', 'out.html', 'tokens.json'])
    assert options.output == tmp_path.resolve() / 'out.html'
    assert options.tokenfiles == [tmp_path.resolve() / 'tokens.json']

def test_pyproject_toml_config(monkeypatch: MonkeyPatch, tmp_path: Path) -> None:
    (tmp_path / 'pyproject.toml').write_text(EXAMPLE_TOML_CONF)
    monkeypatch.chdir(tmp_path)
    options = Options.defaults()
    assert options.linenumbers is True
    assert options.classprefix == 'rb-'
    assert options.output == tmp_path.resolve() / 'api' / 'source.html'

def test_command_line_wins_over_config(monkeypatch: MonkeyPatch, tmp_path: Path) -> None:
    (tmp_path / 'pyproject.toml').write_text(EXAMPLE_TOML_CONF)
    monkeypatch.chdir(tmp_path)
    options = Options.from_args(['--class-prefix', 'src-'])
    assert options.classprefix == 'src-'

def test_setup_cfg_config(monkeypatch: MonkeyPatch, tmp_path: Path) -> None:
    (tmp_path / 'setup.cfg').write_text(EXAMPLE_INI_CONF)
    monkeypatch.chdir(tmp_path)
    options = Options.defaults()
    assert options.linenumbers is True
    assert options.classprefix == 'rb-'

def test_explicit_config_file(monkeypatch: MonkeyPatch, tmp_path: Path) -> None:
    conf = tmp_path / 'conf.ini'
    conf.write_text("[rbdoctor]\npre = true\n")
    monkeypatch.chdir(tmp_path)
    assert Options.from_args(['--config', str(conf)]).pre is True

def test_unknown_config_option(monkeypatch: MonkeyPatch, tmp_path: Path) -> None:
    (tmp_path / 'pyproject.toml').write_text('[tool.rbdoctor]\ncolours = "many"\n')
    monkeypatch.chdir(tmp_path)
    with pytest.warns(UserWarning, match="No such config option: 'colours'"):
        options = Options.defaults()
    assert options.classprefix == 'ruby-'
