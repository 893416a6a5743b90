from zipmend.tools.pack_folder import iter_host_files, main


def _make_tree(root):
    (root / "sub").mkdir(parents=True)
    (root / "a.txt").write_bytes(b"a")
    (root / ".DS_Store").write_bytes(b"ds")
    (root / "sub" / ".secret").write_bytes(b"s")
    (root / "sub" / "b.txt").write_bytes(b"b")


def test_iter_host_files_prefixes_folder_name(tmp_path):
    root = tmp_path / "album"
    _make_tree(root)
    names = [p for p, _ in iter_host_files(root)]
    assert "album/a.txt" in names
    assert "album/sub/b.txt" in names
    assert len(names) == 4


def test_pack_folder_writes_clean_zip(tmp_path, unzip):
    root = tmp_path / "album"
    _make_tree(root)
    out = tmp_path / "out.zip"
    assert main([str(root), "-o", str(out), "--remove-hidden"]) == 0
    assert unzip(out.read_bytes()) == {"album/a.txt": b"a", "album/sub/b.txt": b"b"}


def test_pack_folder_keep_ds_store(tmp_path, unzip):
    root = tmp_path / "album"
    _make_tree(root)
    out = tmp_path / "out.zip"
    assert main([str(root), "-o", str(out), "--keep-ds-store"]) == 0
    assert set(unzip(out.read_bytes())) == {
        "album/a.txt", "album/.DS_Store", "album/sub/.secret", "album/sub/b.txt",
    }


def test_pack_folder_dry_run(tmp_path, capsys):
    root = tmp_path / "album"
    _make_tree(root)
    assert main([str(root), "--dry-run"]) == 0
    out = capsys.readouterr().out
    assert "[settings-file] album/.DS_Store" in out
    assert "[hidden-file] album/sub/.secret" in out
    assert not (tmp_path / "album.zip").exists()


def test_pack_folder_rejects_missing_folder(tmp_path):
    assert main([str(tmp_path / "missing")]) == 2
