from pathlib import Path

import pytest


def write(path: Path, text: str) -> Path:
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(text, encoding="utf-8")
    return path


def create_theme(root: Path, name: str = "base") -> Path:
    """Write a complete theme folder and return its path."""
    theme = root / name
    write(theme / "robots.txt", "User-agent: *\n")
    write(theme / "assets" / "asset.txt", f"asset from {name}\n")
    write(theme / "scss" / "_variables.scss", "$color: #ff0000;\n")
    write(
        theme / "scss" / "index.scss",
        '@import "variables";\n.' + name + " { color: $color; }\n",
    )
    write(theme / "js" / "index.js", "function add(a, b) { return a + b; }\nadd(1, 2);\n")
    write(
        theme / "templates" / "default.jinja",
        "<html><body><main>{{ body }}</main></body></html>\n",
    )
    write(theme / "templates" / "alternate.jinja", "<p>Puppies</p>{{ body }}\n")
    return theme


@pytest.fixture
def no_esbuild(monkeypatch):
    monkeypatch.setattr("portatheme.scripts.find_executable", lambda name, roots=(): None)
