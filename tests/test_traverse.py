from pathlib import Path

import pytest

from mobilegen.bicycle.traverse import (
    ActionKind,
    TraversalError,
    no_transform,
    traverse,
)


@pytest.fixture
def tree(tmp_path):
    src = tmp_path / "src"
    (src / "sub").mkdir(parents=True)
    (src / "plain.txt").write_text("x")
    (src / "page.html.hbs").write_text("{{a}}")
    (src / "sub" / "inner.txt").write_text("y")
    return src, tmp_path / "out"


def test_directories_come_first(tree):
    src, out = tree
    actions = list(traverse(src, out))
    dirs = [a for a in actions if a.is_create_directory]
    assert {a.dest for a in dirs} == {out, out / "sub"}
    assert all(a.is_create_directory for a in actions[: len(dirs)])


def test_template_strips_extension(tree):
    src, out = tree
    templates = [a for a in traverse(src, out) if a.is_write_template]
    assert [a.dest for a in templates] == [out / "page.html"]
    assert templates[0].src == src / "page.html.hbs"


def test_copies(tree):
    src, out = tree
    copies = {a.dest for a in traverse(src, out) if a.kind is ActionKind.COPY_FILE}
    assert copies == {out / "plain.txt", out / "sub" / "inner.txt"}


def test_no_template_ext_copies_everything(tree):
    src, out = tree
    assert not any(a.is_write_template for a in traverse(src, out, no_transform, None))


def test_single_file_source(tree):
    src, out = tree
    actions = list(traverse(src / "plain.txt", out))
    assert [(a.kind, a.dest) for a in actions] == [(ActionKind.COPY_FILE, out / "plain.txt")]


def test_transform_applied(tree):
    src, out = tree
    actions = traverse(src, out, lambda p: Path(str(p).upper()))
    assert all(str(a.dest) == str(a.dest).upper() for a in actions)


def test_transform_failure_wrapped(tree):
    src, out = tree

    def boom(path):
        raise ValueError("bad")

    with pytest.raises(TraversalError):
        traverse(src, out, boom)


def test_missing_dir_raises(tmp_path):
    with pytest.raises(TraversalError):
        traverse(tmp_path / "absent", tmp_path / "out")


def test_no_transform_identity():
    assert no_transform("a/b") == Path("a/b")