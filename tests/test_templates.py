import pytest

from cxxtool.core.config_model import ProjectConfig
from cxxtool.core.errors import TemplateError
from cxxtool.templates import TemplateLibrary, expand, find_blocks


def _project(version="1.0.0", prefix="MPSL"):
    return ProjectConfig.from_mapping(
        {"product": "mpsl", "version": version, "prefix": prefix, "source": "src/mpsl"}
    )


BUILD_H = (
    "// [blend::Build - VERSION]\n"
    "\n"
    "// [@VERSION{@]\n"
    "#define MPSL_VERSION_MAJOR 0\n"
    "// [@VERSION}@]\n"
    "\n"
    "// [@OS{@]\n"
    "#define MPSL_OS_WINDOWS (0)\n"
    "// [@OS}@]\n"
)


def test_find_blocks():
    blocks = find_blocks(BUILD_H)
    assert [(b.name, b.begin, b.end) for b in blocks] == [("VERSION", 2, 4), ("OS", 6, 8)]
    assert blocks[1].body == "#define MPSL_OS_WINDOWS (0)\n"


def test_find_blocks_allows_indented_markers():
    text = "  // [@X{@]\n  body\n  //[@X}@]  \n"
    assert [b.name for b in find_blocks(text)] == ["X"]


@pytest.mark.parametrize(
    "text, line",
    [
        ("// [@A{@]\nbody\n", 1),
        ("body\n// [@A}@]\n", 2),
        ("// [@A{@]\n// [@B}@]\n", 2),
        ("// [@A{@]\n// [@B{@]\n// [@B}@]\n// [@A}@]\n", 2),
    ],
)
def test_malformed_markers(text, line):
    with pytest.raises(TemplateError) as exc:
        find_blocks(text)
    assert exc.value.line == line


def test_expand_builtin_version():
    result = expand(BUILD_H, TemplateLibrary.builtin(), _project(version="2.3.4-beta"))

    assert result == (
        "// [blend::Build - VERSION]\n"
        "\n"
        "// [@VERSION{@]\n"
        "#define MPSL_VERSION_MAJOR 2\n"
        "#define MPSL_VERSION_MINOR 3\n"
        "#define MPSL_VERSION_PATCH 4\n"
        '#define MPSL_VERSION_STRING "2.3.4-beta"\n'
        "// [@VERSION}@]\n"
        "\n"
        "// [@OS{@]\n"
        "#define MPSL_OS_WINDOWS (0)\n"
        "// [@OS}@]\n"
    )


def test_expand_is_stable():
    library = TemplateLibrary.builtin()
    once = expand(BUILD_H, library, _project())
    assert expand(once, library, _project()) == once


def test_expand_keeps_crlf():
    text = "// [@VERSION{@]\r\nold\r\n// [@VERSION}@]\r\n"
    result = expand(text, TemplateLibrary.builtin(), _project(prefix="BL"))
    assert "\n" not in result.replace("\r\n", "")
    assert "#define BL_VERSION_STRING \"1.0.0\"\r\n// [@VERSION}@]\r\n" in result


def test_text_without_blocks_is_untouched():
    text = "int main() {}\n"
    assert expand(text, TemplateLibrary.builtin(), _project()) == text


def test_directory_templates(tmp_path):
    (tmp_path / "OS.h").write_text(
        "#define ${PREFIX}_OS_LINUX (1)\n// ${PRODUCT} ${UNKNOWN} $$\n", encoding="utf-8"
    )
    (tmp_path / "notes.txt").write_text("ignored", encoding="utf-8")

    library = TemplateLibrary.from_directory(tmp_path)

    assert library.names() == ["OS", "VERSION"]
    assert "notes" not in library
    rendered = library.render("OS", _project())
    assert rendered == "#define MPSL_OS_LINUX (1)\n// mpsl ${UNKNOWN} $\n"

    result = expand(BUILD_H, library, _project())
    assert "// [@OS{@]\n#define MPSL_OS_LINUX (1)\n// mpsl ${UNKNOWN} $\n// [@OS}@]\n" in result


def test_directory_overrides_builtin(tmp_path):
    (tmp_path / "VERSION.in").write_text("// v${VERSION}", encoding="utf-8")
    library = TemplateLibrary.from_directory(tmp_path)
    assert library.render("VERSION", _project()) == "// v1.0.0"
    assert len(TemplateLibrary.from_directory(tmp_path, include_builtin=False)) == 1


def test_render_unknown_returns_none():
    assert TemplateLibrary().render("NOPE", _project()) is None


def test_rendered_body_ends_with_single_line_break():
    library = TemplateLibrary({"X": "#define A 1\n\n\n", "EMPTY": "\n\n"})
    text = "// [@X{@]\nold\n// [@X}@]\n// [@EMPTY{@]\nold\n// [@EMPTY}@]\n"

    assert expand(text, library, _project()) == (
        "// [@X{@]\n#define A 1\n// [@X}@]\n// [@EMPTY{@]\n// [@EMPTY}@]\n"
    )


def test_expand_keeps_cr_only_endings():
    library = TemplateLibrary({"X": "#define A 1\n"})
    text = "// [@X{@]\rold\r// [@X}@]\r"
    assert expand(text, library, _project()) == "// [@X{@]\r#define A 1\r// [@X}@]\r"
