# tests/unit/test_local_fs.py
from pathlib import Path

import pytest

from fspecs.adapters.local_fs import LocalFS
from fspecs.domain.errors import AlreadyExists, FilesystemError, NotADirectory, NotFound
from fspecs.ports.filesystem import FilesystemPort


def test_is_a_filesystem_port():
    assert isinstance(LocalFS(), FilesystemPort)


def test_stat_follow_and_nofollow(tmp_path: Path):
    (tmp_path / "f").write_text("abc")
    (tmp_path / "l").symlink_to(tmp_path / "f")
    fs = LocalFS()
    assert fs.stat(str(tmp_path / "l")).is_file
    assert fs.stat(str(tmp_path / "l"), follow_symlinks=False).is_symlink


def test_stat_missing_is_not_found(tmp_path: Path):
    with pytest.raises(NotFound) as info:
        LocalFS().stat(str(tmp_path / "x"))
    assert info.value.op == "stat"


def test_list_dir(tmp_path: Path):
    (tmp_path / "a").write_text("")
    (tmp_path / "b").mkdir()
    assert sorted(LocalFS().list_dir(str(tmp_path))) == [str(tmp_path / "a"), str(tmp_path / "b")]


def test_list_dir_on_file(tmp_path: Path):
    (tmp_path / "a").write_text("")
    with pytest.raises(NotADirectory):
        LocalFS().list_dir(str(tmp_path / "a"))


def test_open_bytes_streams_in_chunks(tmp_path: Path):
    (tmp_path / "f").write_bytes(b"0123456789")
    assert list(LocalFS().open_bytes(str(tmp_path / "f"), chunk_size=4)) == [b"0123", b"4567", b"89"]


def test_open_bytes_missing(tmp_path: Path):
    with pytest.raises(NotFound):
        list(LocalFS().open_bytes(str(tmp_path / "nope")))


def test_temp_write_replace(tmp_path: Path):
    fs = LocalFS()
    tmp = fs.create_temp(str(tmp_path), prefix=".x.")
    assert Path(tmp).parent == tmp_path
    assert Path(tmp).name.startswith(".x.")
    fs.write_chunks(tmp, [b"ab", b"cd"])
    fs.replace(tmp, str(tmp_path / "final"))
    assert (tmp_path / "final").read_bytes() == b"abcd"
    assert not Path(tmp).exists()


def test_make_dir(tmp_path: Path):
    fs = LocalFS()
    fs.make_dir(str(tmp_path / "a"))
    fs.make_dir(str(tmp_path / "a"), exist_ok=True)
    with pytest.raises(AlreadyExists):
        fs.make_dir(str(tmp_path / "a"))
    (tmp_path / "file").write_text("")
    with pytest.raises(AlreadyExists):
        fs.make_dir(str(tmp_path / "file"), exist_ok=True)
    fs.make_dir(str(tmp_path / "p" / "q"), parents=True)
    assert (tmp_path / "p" / "q").is_dir()


def test_remove_missing(tmp_path: Path):
    with pytest.raises(FilesystemError):
        LocalFS().remove(str(tmp_path / "nope"))


def test_accepts_path_objects(tmp_path: Path):
    fs = LocalFS()
    (tmp_path / "a.txt").write_bytes(b"abc")
    assert fs.stat(tmp_path / "a.txt").size == 3
    assert fs.list_dir(tmp_path) == [str(tmp_path / "a.txt")]
    assert fs.read_prefix(tmp_path / "a.txt", 2) == b"ab"
    assert isinstance(fs.real_path(tmp_path), str)
    with pytest.raises(NotFound) as info:
        fs.stat(tmp_path / "missing")
    assert info.value.path == str(tmp_path / "missing")


def test_temp_file_and_folder_names(tmp_path: Path):
    fs = LocalFS()
    tmp = fs.create_temp(tmp_path, prefix="pre-", suffix=".json")
    assert Path(tmp).name.startswith("pre-") and tmp.endswith(".json")
    folder = fs.make_temp_dir(tmp_path, prefix="d-", suffix="-x")
    assert Path(folder).is_dir()
    assert Path(folder).parent == tmp_path
    assert Path(folder).name.startswith("d-") and folder.endswith("-x")


def test_remove_dir_and_tree(tmp_path: Path):
    fs = LocalFS()
    (tmp_path / "full" / "sub").mkdir(parents=True)
    (tmp_path / "full" / "sub" / "f").write_text("x")
    with pytest.raises(FilesystemError):
        fs.remove_dir(tmp_path / "full")
    fs.remove_tree(tmp_path / "full")
    assert not (tmp_path / "full").exists()
    (tmp_path / "empty").mkdir()
    fs.remove_dir(tmp_path / "empty")
    assert not (tmp_path / "empty").exists()
