# tests/integration/test_detect_real_files.py
import gzip
import sqlite3
import tarfile
import zipfile
from pathlib import Path

import pytest
from PIL import Image

from fspecs.services.walker import walk
from fspecs.specs.file import FileSpec


def _save_image(tmp_path: Path, name: str, fmt: str, mode: str = "RGB") -> Path:
    p = tmp_path / name
    img = Image.new(mode, (16, 16), (200, 40, 40) if mode == "RGB" else 128)
    img.save(p, format=fmt)
    return p


@pytest.mark.parametrize(
    "name, fmt, expected",
    [
        ("pic.png", "PNG", "image/png"),
        ("pic.gif", "GIF", "image/gif"),
        ("pic.bmp", "BMP", "image/bmp"),
        ("pic.tif", "TIFF", "image/tiff"),
        ("pic.jpg", "JPEG", "image/jpeg"),
        ("pic.ico", "ICO", "image/ico"),
        ("pic.pdf", "PDF", "document/pdf"),
    ],
)
def test_images_written_by_pillow(tmp_path: Path, name, fmt, expected):
    path = _save_image(tmp_path, name, fmt)
    assert str(FileSpec(str(path)).detect_type()) == expected


def test_content_wins_over_extension(tmp_path: Path):
    src = _save_image(tmp_path, "really_png.png", "PNG")
    disguised = tmp_path / "notes.txt"
    disguised.write_bytes(src.read_bytes())
    assert str(FileSpec(str(disguised)).detect_type()) == "image/png"


def test_archives_and_databases(tmp_path: Path):
    zpath = tmp_path / "bundle.zip"
    with zipfile.ZipFile(zpath, "w") as zf:
        zf.writestr("hello.txt", "hi")

    gzpath = tmp_path / "blob.gz"
    with gzip.open(gzpath, "wb") as fh:
        fh.write(b"hello")

    member = tmp_path / "member.txt"
    member.write_text("m")
    tpath = tmp_path / "bundle.tar"
    with tarfile.open(tpath, "w", format=tarfile.USTAR_FORMAT) as tf:
        tf.add(member, arcname="member.txt")

    dbpath = tmp_path / "data.db"
    con = sqlite3.connect(dbpath)
    try:
        con.execute("CREATE TABLE t (x INTEGER)")
        con.commit()
    finally:
        con.close()

    assert str(FileSpec(str(zpath)).detect_type()) == "archive/zip"
    assert str(FileSpec(str(gzpath)).detect_type()) == "archive/gzip"
    assert str(FileSpec(str(tpath)).detect_type()) == "archive/tar"
    assert str(FileSpec(str(dbpath)).detect_type()) == "database/sqlite"


def test_walk_then_detect(tmp_path: Path):
    (tmp_path / "imgs").mkdir()
    _save_image(tmp_path / "imgs", "a.png", "PNG")
    _save_image(tmp_path / "imgs", "b.gif", "GIF")
    (tmp_path / "readme.md").write_text("# hello\n")

    found = {
        f.name: str(f.detect_type())
        for f in walk(str(tmp_path), include_dirs=False, include_symlinks=False)
    }
    assert found == {"a.png": "image/png", "b.gif": "image/gif", "readme.md": "text/unknown"}
