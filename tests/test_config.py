"""Tests for YAML config loading."""

from pathlib import Path

import pytest

from tabhtml.compiler import TabhtmlError
from tabhtml.config import ConfigError, load_config, parse_config


def test_load_config(tmp_path):
    (tmp_path / "partials").mkdir()
    (tmp_path / "partials" / "nav.tmpl").write_text("nav.menu")
    cfg_file = tmp_path / "tabhtml.yml"
    cfg_file.write_text(
        "write:\n"
        "  - src: index.tmpl\n"
        "    dst: index.html\n"
        "watch: ['partials/*.tmpl']\n"
        "encoding: utf-8\n"
        "strict: true\n"
    )

    cfg = load_config(cfg_file, base_path=tmp_path)

    assert cfg.write_pairs == {tmp_path / "index.tmpl": tmp_path / "index.html"}
    assert cfg.watch_paths == {tmp_path / "partials" / "nav.tmpl"}
    assert cfg.encoding == "utf-8"
    assert cfg.strict is True
    assert cfg.make_compiler().strict is True


def test_defaults():
    cfg = parse_config({"write": [{"src": "a.tmpl", "dst": "a.html"}]}, Path("site"))
    assert cfg.write_pairs == {Path("site/a.tmpl"): Path("site/a.html")}
    assert cfg.watch_paths == set()
    assert cfg.encoding == "ascii"
    assert cfg.strict is False
    assert cfg.indent == "\t"
    assert cfg.default_tag == "div"


@pytest.mark.parametrize("cfg", [
    None,
    {},
    {"write": []},
    {"write": [{"src": "a.tmpl"}]},
    {"write": ["a.tmpl"]},
    {"write": [{"src": "a.tmpl", "dst": "a.html"}], "indent": 2},
    {"write": [{"src": "a.tmpl", "dst": "a.html"}], "indent": ""},
    {"write": [{"src": "a.tmpl", "dst": "a.html"}], "default_tag": None},
    {"write": [{"src": "a.tmpl", "dst": "a.html"}], "encoding": 8},
])
def test_invalid_config(cfg):
    with pytest.raises(ConfigError):
        parse_config(cfg)


def test_malformed_yaml(tmp_path):
    cfg_file = tmp_path / "bad.yml"
    cfg_file.write_text("write: [\n")
    with pytest.raises(ConfigError):
        load_config(cfg_file)


def test_config_error_is_tabhtml_error():
    assert issubclass(ConfigError, TabhtmlError)
