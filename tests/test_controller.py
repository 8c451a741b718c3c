from pathlib import Path

import pytest

from cxxtool.core.config_model import ProjectConfig, ToolOptions
from cxxtool.core.controller import FileOutcome, RunResult, SourceController
from cxxtool.core.errors import SourceDirectoryError
from cxxtool.core.ports import Reporter, SourceStore
from cxxtool.text_processor import TextProcessor
from cxxtool.tool_options import Tool


class _Store(SourceStore):
    def __init__(self, files):
        self.files = dict(files)
        self.writes = []

    def iter_sources(self, root):
        return list(self.files)

    def read(self, path):
        value = self.files[path]
        if isinstance(value, Exception):
            raise value
        return value

    def write(self, path, text):
        self.writes.append(path)
        self.files[path] = text


class _Reporter(Reporter):
    def __init__(self):
        self.changed = []
        self.failed = []
        self.summaries = []

    def file_changed(self, path, tools):
        self.changed.append((path, tools))

    def file_failed(self, path, error):
        self.failed.append((path, error))

    def summary(self, result):
        self.summaries.append(result)


def _controller(tmp_path, files, tools):
    (tmp_path / "src").mkdir(exist_ok=True)
    project = ProjectConfig.from_mapping(
        {"product": "demo", "version": "1.0.0", "prefix": "DEMO", "source": "src"},
        root=tmp_path,
    )
    store = _Store(files)
    reporter = _Reporter()
    controller = SourceController(project, TextProcessor(tools), store, reporter)
    return controller, store, reporter


def test_fix_rewrites_changed_files_only(tmp_path):
    a, b = Path("src/a.cpp"), Path("src/b.h")
    controller, store, reporter = _controller(
        tmp_path,
        {b: "\tint y;  \n", a: "int x;\n"},
        ToolOptions(no_tabs=True, no_trailing_spaces=True),
    )

    result = controller.run(write=True)

    assert result.checked == 2
    assert result.changed == [b]
    assert result.ok and not result.clean
    assert store.writes == [b]
    assert store.files[b] == "  int y;\n"
    assert reporter.changed == [(b, [Tool.NO_TABS, Tool.NO_TRAILING_SPACES])]
    assert reporter.summaries == [result]


def test_check_does_not_write(tmp_path):
    path = Path("src/a.cpp")
    controller, store, reporter = _controller(
        tmp_path, {path: "int x;\r\n"}, ToolOptions(unix_eol=True)
    )

    assert controller.process_file(path, write=False) is FileOutcome.CHANGED
    assert store.writes == []
    assert store.files[path] == "int x;\r\n"
    assert reporter.changed == [(path, [Tool.UNIX_EOL])]


def test_unchanged_file(tmp_path):
    path = Path("src/a.cpp")
    controller, store, reporter = _controller(tmp_path, {path: "int x;\n"}, ToolOptions(no_tabs=True))

    assert controller.process_file(path) is FileOutcome.UNCHANGED
    assert reporter.changed == []
    assert controller.run().clean


def test_failure_does_not_stop_run(tmp_path):
    bad, broken, good = Path("src/a.h"), Path("src/b.h"), Path("src/c.h")
    controller, store, reporter = _controller(
        tmp_path,
        {
            bad: "// [@VERSION{@]\n",
            broken: UnicodeDecodeError("utf-8", b"\xff", 0, 1, "invalid start byte"),
            good: "// [@VERSION{@]\n// [@VERSION}@]\n",
        },
        ToolOptions(expand_templates=True),
    )

    result = controller.run()

    assert not result.ok
    assert set(result.failed) == {bad, broken}
    assert "never closed" in result.failed[bad]
    assert result.changed == [good]
    assert "#define DEMO_VERSION_STRING" in store.files[good]
    assert [path for path, _ in reporter.failed] == [bad, broken]


def test_missing_source_directory(tmp_path):
    project = ProjectConfig.from_mapping(
        {"product": "demo", "version": "1.0.0", "prefix": "DEMO", "source": "missing"},
        root=tmp_path,
    )
    controller = SourceController(project, TextProcessor([]), _Store({}), _Reporter())
    with pytest.raises(SourceDirectoryError):
        controller.run()


def test_run_result_flags():
    assert RunResult().clean
    assert not RunResult(changed=[Path("x")]).clean
    assert not RunResult(failed={Path("x"): "boom"}).ok


class _ReadOnlyStore(_Store):
    def __init__(self, files, read_only):
        super().__init__(files)
        self.read_only = read_only

    def write(self, path, text):
        if path in self.read_only:
            raise PermissionError(13, "Permission denied", str(path))
        super().write(path, text)


def test_write_failure_is_reported_and_run_continues(tmp_path):
    a, b = Path("src/a.h"), Path("src/b.h")
    (tmp_path / "src").mkdir()
    project = ProjectConfig.from_mapping(
        {"product": "demo", "version": "1.0.0", "prefix": "DEMO", "source": "src"},
        root=tmp_path,
    )
    store = _ReadOnlyStore({a: "\tx;\n", b: "\ty;\n"}, read_only={a})
    reporter = _Reporter()
    controller = SourceController(project, TextProcessor([Tool.NO_TABS]), store, reporter)

    result = controller.run()

    assert list(result.failed) == [a]
    assert "Permission denied" in result.failed[a]
    assert result.changed == [b]
    assert store.files[b] == "  y;\n"
    assert [path for path, _ in reporter.failed] == [a]
    assert reporter.changed == [(b, [Tool.NO_TABS])]
    assert reporter.summaries == [result]
