from click.testing import CliRunner
from conftest import create_theme, write

from portatheme import __version__
from portatheme.cli import cli
from portatheme.config import load_config, theme_from_config


def test_load_config_defaults_and_overrides(tmp_path):
    config = load_config(tmp_path)
    assert config["output_dir"] == "dist"
    assert config["parents"] == []

    write(tmp_path / "portatheme.yaml", "- not a mapping\n")
    assert load_config(tmp_path)["theme"] == "."

    write(tmp_path / "portatheme.yaml", "theme: themes/child\nparents: themes/base\n")
    config = load_config(tmp_path)
    assert config["theme"] == "themes/child"
    assert config["parents"] == ["themes/base"]


def test_theme_from_config_builds_chain(tmp_path):
    create_theme(tmp_path / "themes", "grandparent")
    create_theme(tmp_path / "themes", "parent")
    create_theme(tmp_path / "themes", "child")
    config = {
        "theme": "themes/child",
        "parents": ["themes/parent", "themes/grandparent"],
        "output_dir": "public",
        "debounce": 0.5,
    }

    theme = theme_from_config(config, tmp_path)

    assert [p.name for p in theme.chain] == ["child", "parent", "grandparent"]
    assert theme.dest == tmp_path / "public"
    assert theme.compiler.debounce == 0.5


def test_cli_version():
    result = CliRunner().invoke(cli, ["--version"])
    assert result.exit_code == 0
    assert __version__ in result.output


def test_cli_page_and_build(monkeypatch, no_esbuild, tmp_path):
    create_theme(tmp_path / "themes", "base")
    child = tmp_path / "themes" / "child"
    write(child / "js" / "index.js", "console.log('child');\n")
    write(child / "scss" / "index.scss", '@import "base";\n')
    write(
        tmp_path / "portatheme.yaml",
        "theme: themes/child\nparents:\n  - themes/base\noutput_dir: public\n",
    )
    write(tmp_path / "page.yaml", "body: Kittens\n")
    monkeypatch.chdir(tmp_path)
    runner = CliRunner()

    result = runner.invoke(cli, ["page", "about/index.html", "--data", "page.yaml"])
    assert result.exit_code == 0, result.output
    html = (tmp_path / "public" / "about" / "index.html").read_text(encoding="utf-8")
    assert "<main>Kittens</main>" in html

    result = runner.invoke(cli, ["build"])
    assert result.exit_code == 0, result.output
    assert "2 theme(s)" in result.output
    assert (tmp_path / "public" / "assets" / "asset.txt").exists()
    assert ".base" in (tmp_path / "public" / "css" / "style.css").read_text(encoding="utf-8")
    assert (tmp_path / "public" / "js" / "script.js").exists()


def test_cli_options_override_config(monkeypatch, no_esbuild, tmp_path):
    create_theme(tmp_path, "base")
    create_theme(tmp_path, "other")
    write(tmp_path / "portatheme.yaml", "theme: base\noutput_dir: public\n")
    monkeypatch.chdir(tmp_path)

    result = CliRunner().invoke(
        cli, ["page", "index.html", "--theme", "other", "--output", "site", "--layout", "alternate"]
    )
    assert result.exit_code == 0, result.output
    assert "Puppies" in (tmp_path / "site" / "index.html").read_text(encoding="utf-8")
    assert not (tmp_path / "public").exists()


def test_cli_reports_missing_layout(monkeypatch, tmp_path):
    create_theme(tmp_path, "base")
    monkeypatch.chdir(tmp_path)

    result = CliRunner().invoke(cli, ["page", "index.html", "--theme", "base", "--layout", "nope"])
    assert result.exit_code == 1
    assert "no layout file named nope.jinja" in result.output


def test_cli_reports_build_failure(monkeypatch, no_esbuild, tmp_path):
    theme = create_theme(tmp_path, "base")
    write(theme / "scss" / "index.scss", "body { color: $missing; }")
    monkeypatch.chdir(tmp_path)

    result = CliRunner().invoke(cli, ["build", "--theme", "base"])
    assert result.exit_code == 1
    assert "Build failed in task 'styles'" in result.output


def test_cli_page_rejects_non_mapping_data(monkeypatch, tmp_path):
    create_theme(tmp_path, "base")
    write(tmp_path / "data.yaml", "- a\n- b\n")
    monkeypatch.chdir(tmp_path)

    result = CliRunner().invoke(
        cli, ["page", "index.html", "--theme", "base", "--data", "data.yaml"]
    )
    assert result.exit_code != 0
    assert "mapping" in result.output


def test_main_invokes_cli(monkeypatch):
    import portatheme.cli as cli_mod

    called = {}
    monkeypatch.setattr(cli_mod, "cli", lambda: called.setdefault("ran", True))
    cli_mod.main()
    assert called["ran"]


def test_module_main_entrypoint():
    from portatheme.__main__ import main

    assert callable(main)


def test_cli_page_absolute_dest_stays_in_output(monkeypatch, tmp_path):
    create_theme(tmp_path, "base")
    monkeypatch.chdir(tmp_path)

    result = CliRunner().invoke(
        cli, ["page", "/about/index.html", "--theme", "base", "--output", "site"]
    )
    assert result.exit_code == 0, result.output
    written = tmp_path / "site" / "about" / "index.html"
    assert written.exists()
    assert f"Wrote {written}" in result.output

    result = CliRunner().invoke(cli, ["page", "../up.html", "--theme", "base"])
    assert result.exit_code == 1
    assert "outside the output directory" in result.output
    assert not (tmp_path.parent / "up.html").exists()
