from pathlib import Path

from conftest import create_theme, write

from portatheme.chain import (
    AssetFile,
    build_chain,
    glob_files,
    iter_assets,
    match_glob,
    watch_paths,
)
from portatheme.location import resolve_location
from portatheme.theme import Theme


def test_chain_without_parent(tmp_path):
    base = create_theme(tmp_path, "base")
    assert build_chain(base) == (base,)
    assert Theme(str(base)).chain == (base.resolve(),)


def test_chain_is_transitive(tmp_path):
    grandparent = Theme(str(create_theme(tmp_path, "grandparent")))
    parent = Theme(str(create_theme(tmp_path, "parent")), grandparent)
    child = Theme(str(create_theme(tmp_path, "child")), parent)

    assert child.chain == (
        (tmp_path / "child").resolve(),
        (tmp_path / "parent").resolve(),
        (tmp_path / "grandparent").resolve(),
    )
    assert child.parents == child.chain[1:]
    assert parent.chain == child.chain[1:]


def test_watch_paths_per_theme():
    a = Path("/themes/a")
    b = Path("/themes/b")
    paths = watch_paths([a, b])
    assert paths.assets == [
        "/themes/a/*",
        "/themes/a/assets/**",
        "/themes/b/*",
        "/themes/b/assets/**",
    ]
    assert paths.styles == ["/themes/a/scss/**/*.scss", "/themes/b/scss/**/*.scss"]
    assert paths.scripts == ["/themes/a/js/**/*.js", "/themes/b/js/**/*.js"]


def test_glob_files_skips_directories_and_duplicates(tmp_path):
    theme = create_theme(tmp_path, "base")
    write(theme / "assets" / "img" / "logo.svg", "<svg/>")

    files = list(
        glob_files([str(theme / "*"), str(theme / "assets" / "**"), str(theme / "*.txt")], theme)
    )
    relatives = [f.relative for f in files]
    assert Path("robots.txt") in relatives
    assert Path("assets/asset.txt") in relatives
    assert Path("assets/img/logo.svg") in relatives
    assert relatives.count(Path("robots.txt")) == 1
    assert not any(f.path.is_dir() for f in files)


def test_iter_assets_keeps_each_theme_as_base(tmp_path):
    parent = create_theme(tmp_path, "parent")
    child = create_theme(tmp_path / "nested" / "deeper", "child")
    write(parent / "assets" / "fonts" / "a.woff", "font")

    assets = list(iter_assets([child, parent]))
    by_theme = {}
    for asset in assets:
        owner = child if child in asset.path.parents else parent
        by_theme.setdefault(owner, []).append(asset.relative)

    assert Path("assets/fonts/a.woff") in by_theme[parent]
    assert Path("robots.txt") in by_theme[child]
    # Child entries come first.
    assert assets[0].path.is_relative_to(child)


def test_iter_assets_uses_injected_source():
    calls = []

    def source(patterns, base):
        calls.append((patterns, base))
        yield AssetFile(path=base / "x.txt", relative=Path("x.txt"))

    a, b = Path("/a"), Path("/b")
    result = list(iter_assets([a, b], source=source))
    assert [r.path for r in result] == [Path("/a/x.txt"), Path("/b/x.txt")]
    assert calls[0] == (["/a/*", "/a/assets/**"], a)
    assert calls[1][1] == b


def test_match_glob_segments():
    assert match_glob("/t/*", "/t/robots.txt")
    assert not match_glob("/t/*", "/t/scss/index.scss")
    assert match_glob("/t/assets/**", "/t/assets/img/a.png")
    assert match_glob("/t/scss/**/*.scss", "/t/scss/index.scss")
    assert match_glob("/t/scss/**/*.scss", "/t/scss/parts/_grid.scss")
    assert not match_glob("/t/scss/**/*.scss", "/t/scss/readme.md")
    assert not match_glob("/t/js/**/*.js", "/t/jsx/index.js")


def test_match_glob_escaped_theme_directory():
    [pattern, _] = watch_paths([Path("/themes/site[1]")]).assets
    assert pattern == "/themes/site[[]1]/*"
    assert match_glob(pattern, "/themes/site[1]/robots.txt")
    assert not match_glob(pattern, "/themes/site1/robots.txt")
    [styles] = watch_paths([Path("/themes/what?*")]).styles
    assert match_glob(styles, "/themes/what?*/scss/index.scss")
    assert not match_glob(styles, "/themes/whatnot/scss/index.scss")
    assert match_glob("/t/[a-c].txt", "/t/b.txt")
    assert not match_glob("/t/[!a-c].txt", "/t/b.txt")


def test_iter_assets_theme_path_with_glob_characters(tmp_path):
    theme = create_theme(tmp_path, "site[1]")
    create_theme(tmp_path, "site1")
    found = sorted(str(asset.relative) for asset in iter_assets([theme]))
    assert found == ["assets/asset.txt", "robots.txt"]
    assert all(asset.path.is_relative_to(theme) for asset in iter_assets([theme]))


def test_resolve_location_path(monkeypatch, tmp_path):
    monkeypatch.chdir(tmp_path)
    assert resolve_location("themes/base") == (tmp_path / "themes" / "base").resolve()
    assert resolve_location("missing_theme_folder_xyz") == (
        tmp_path / "missing_theme_folder_xyz"
    ).resolve()
    assert resolve_location("../up") == (tmp_path.parent / "up").resolve()


def test_resolve_location_package():
    location = resolve_location("jinja2")
    assert location.name == "jinja2"
    assert (location / "__init__.py").exists()


def test_package_name_wins_over_same_named_folder(monkeypatch, tmp_path):
    import email

    create_theme(tmp_path, "email")
    monkeypatch.chdir(tmp_path)
    assert resolve_location("email") == Path(email.__file__).resolve().parent
    assert resolve_location("./email") == (tmp_path / "email").resolve()
