from __future__ import annotations

import io
from dataclasses import dataclass
from typing import Any

import pytest

import package_loader.__main__ as pl_main
from package_loader.cli.listing import ListCommand, handle_list, parse_dir_arg
from package_loader.exceptions import PackageLoaderError, UnknownDirectoryError


@dataclass(slots=True)
class Captured:
    called: bool = False
    args: Any = None


@pytest.fixture(autouse=True)
def _isolated_cwd(tmp_path, monkeypatch):
    # keep stray config.toml / .env files out of the settings lookup
    monkeypatch.chdir(tmp_path)


def test_main_list_subcommand_calls_handle_list(monkeypatch: pytest.MonkeyPatch) -> None:
    cap = Captured()

    def fake_handle_list(cmd: Any) -> int:
        cap.called = True
        cap.args = cmd
        return 0

    monkeypatch.setattr(pl_main, "handle_list", fake_handle_list)

    pl_main.main(["list", "--dirs", "plugins=/srv/p", "/srv/t", "--root", "plugins", "--loglevel", "debug"])

    assert cap.called is True
    cmd = cap.args
    assert cmd.dirs == ["plugins=/srv/p", "/srv/t"]
    assert cmd.root == "plugins"
    assert cmd.loglevel == "debug"


def test_main_requires_a_subcommand() -> None:
    with pytest.raises(SystemExit):
        pl_main.main([])


def test_parse_dir_arg() -> None:
    assert parse_dir_arg("plugins=/srv/p") == ("plugins", "/srv/p")
    assert parse_dir_arg("/srv/t") == ("/srv/t", "/srv/t")
    with pytest.raises(PackageLoaderError):
        parse_dir_arg("=/srv/p")
    with pytest.raises(PackageLoaderError):
        parse_dir_arg("plugins=")


def test_handle_list_prints_sorted_packages(tmp_path, make_tree) -> None:
    plugins = make_tree(tmp_path / "plugins", dirs=["zz/last", "aa/first"], files=["readme.txt"])
    themes = make_tree(tmp_path / "themes", dirs=["foolz/default"])
    out = io.StringIO()

    rc = handle_list(ListCommand(dirs=[f"plugins={plugins}", f"themes={themes}"]), out=out)

    assert rc == 0
    assert out.getvalue().splitlines() == [
        f"plugins\taa/first\t{plugins / 'aa' / 'first'}",
        f"plugins\tzz/last\t{plugins / 'zz' / 'last'}",
        f"themes\tfoolz/default\t{themes / 'foolz' / 'default'}",
    ]


def test_handle_list_single_root(tmp_path, make_tree) -> None:
    plugins = make_tree(tmp_path / "plugins", dirs=["v/p"])
    themes = make_tree(tmp_path / "themes", dirs=["v/t"])
    out = io.StringIO()

    handle_list(ListCommand(dirs=[f"plugins={plugins}", f"themes={themes}"], root="themes"), out=out)

    assert [line.split("\t")[:2] for line in out.getvalue().splitlines()] == [["themes", "v/t"]]


def test_handle_list_uses_config_file_dirs(tmp_path, make_tree) -> None:
    plugins = make_tree(tmp_path / "plugins", dirs=["v/p"])
    cfg = tmp_path / "loader.toml"
    cfg.write_text(f'[loader.dirs]\nplugins = "{plugins}"\n', encoding="utf-8")
    out = io.StringIO()

    handle_list(ListCommand(config_file=str(cfg)), out=out)

    assert out.getvalue().startswith("plugins\tv/p\t")


def test_handle_list_unknown_root_raises(tmp_path, make_tree) -> None:
    plugins = make_tree(tmp_path / "plugins", dirs=["v/p"])

    with pytest.raises(UnknownDirectoryError):
        handle_list(ListCommand(dirs=[f"plugins={plugins}"], root="themes"), out=io.StringIO())


def test_main_exits_with_code_2_on_loader_error(tmp_path, capsys) -> None:
    with pytest.raises(SystemExit) as ei:
        pl_main.main(["list", "--dirs", f"missing={tmp_path / 'missing'}"])

    assert ei.value.code == 2
    assert "Directory not found" in capsys.readouterr().err
