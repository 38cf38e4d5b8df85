import string

import pytest

from propconfig import files


EXTENSION = "sdf"


@pytest.fixture
def find_files_tree(tmp_path):
    """25 dirs A..Y, each holding AA.sdf..YY.sdf, AAA.sdf..YYY.sdf and ABCD.sdf."""
    for i in string.ascii_uppercase[:25]:
        sub = tmp_path / i
        sub.mkdir()
        for j in string.ascii_uppercase[:25]:
            (sub / ("%s.%s" % (j * 2, EXTENSION))).write_text("The file content")
            (sub / ("%s.%s" % (j * 3, EXTENSION))).write_text("The file content")
        (sub / ("ABCD.%s" % EXTENSION)).write_text("The file content")

    # A directory with a matching name must not count as a file.
    (tmp_path / ("ABC.%s" % EXTENSION)).mkdir()

    # Version control metadata is skipped.
    for meta in ["CVS", ".git"]:
        (tmp_path / meta).mkdir()
        (tmp_path / meta / ("ABC.%s" % EXTENSION)).write_text("The file content")
    return tmp_path


def test_file_finder_glob(find_files_tree):
    finder = files.FileFinder("glob:*." + EXTENSION).walk(find_files_tree)
    assert "AAA." + EXTENSION in finder.matching_files
    assert "ABC." + EXTENSION not in finder.matching_files
    assert len(finder.matching_files) == 1275
    assert len(finder.unique_matching_files()) == 51


def test_file_finder_single_char_glob(find_files_tree):
    finder = files.FileFinder("glob:???." + EXTENSION).walk(find_files_tree)
    assert len(finder.matching_files) == 625
    unique = finder.unique_matching_files()
    assert len(unique) == 25
    assert "ABCD." + EXTENSION not in unique


def test_file_finder_regex(find_files_tree):
    finder = files.FileFinder(r"regex:\w{1,3}\." + EXTENSION).walk(find_files_tree)
    assert len(finder.matching_files) == 1250
    unique = finder.unique_matching_files()
    assert len(unique) == 50
    assert "ABCD." + EXTENSION not in unique


def test_find_files(find_files_tree):
    found = files.find_files(find_files_tree, r"regex:\w{1,3}\." + EXTENSION)
    assert len(found) == 50
    assert found == sorted(found)
    assert "ABCD." + EXTENSION not in found


def test_find_files_requires_directory(tmp_path):
    with pytest.raises(FileNotFoundError):
        files.find_files(tmp_path / "missing", "glob:*")
    f = tmp_path / "a.txt"
    f.write_text("x")
    with pytest.raises(NotADirectoryError):
        files.find_files(f, "glob:*")


def test_file_finder_requires_pattern_kind():
    with pytest.raises(ValueError):
        files.FileFinder("*.sdf")


def test_chop_extensions():
    names = ["ABC.sdf.gz", "BCD.sdf.gz", "CD.sdf.gz", "D.sdf.gz", "E.cif.gz"]
    assert files.chop_extensions(names, ".sdf.gz", True) == ["ABC", "BCD", "CD", "D"]
    assert files.chop_extensions(["1SMT-deriv.cif.gz"], "-deriv.cif.gz", True) == ["1SMT"]
    assert files.chop_extensions(["2n8b_cs.str.gz"], "_cs.str.gz", True) == ["2N8B"]


def test_chop_extensions_case():
    names = ["ABC.sdf.gz", "Bcd.sdf.gz", "cd.sdf.gz", "D.sdf.gz"]
    assert files.chop_extensions(names, ".sdf.gz", False) == ["abc", "bcd", "cd", "d"]
    assert files.chop_extensions(names, ".sdf.gz", True) == ["ABC", "BCD", "CD", "D"]


def test_chop_extensions_regex():
    names = [
        "1SMT-assembly1.cif.gz",
        "2trx-assembly3.cif.gz",
        "3HBX-assembly456.cif.gz",
        "HEM-assembly2.cif.gz",
    ]
    chopped = files.chop_extensions_regex(names, r"-assembly\d+\.cif\.gz", True)
    assert chopped == ["1SMT", "2TRX", "3HBX", "HEM"]
    assert "2trx" not in chopped


def test_chop_extensions_regex_rejects_groups():
    with pytest.raises(ValueError):
        files.chop_extensions_regex(["a.gz"], r"(\.gz)", True)


def test_read_ids_from_file(tmp_path):
    f = tmp_path / "ids.txt"
    f.write_text("# header\n1smt extra tokens\n\n2TRX\n1SMT\n4hhb\tchain A\n")
    assert files.read_ids_from_file(f) == ["1SMT", "2TRX", "4HHB"]


def test_read_ids_from_file_max_to_read(tmp_path):
    f = tmp_path / "ids.txt"
    f.write_text("a\nb\nb\nc\nd\n")
    assert files.read_ids_from_file(f, max_to_read=2) == ["A", "B"]
