import io

from sectorkit.tools import (
    bubble_sort,
    cat,
    compare_files,
    copy_file,
    echo,
    lineup,
    main,
    matmult,
    remove_files,
)


def _write(path, data):
    path.write_bytes(data)
    return str(path)


def test_cat_concatenates_files(tmp_path):
    a = _write(tmp_path / "a", b"first\n")
    b = _write(tmp_path / "b", b"x" * 3000)
    out = io.BytesIO()
    assert cat([a, b], out) == 0
    assert out.getvalue() == b"first\n" + b"x" * 3000


def test_cat_reports_missing_file(tmp_path):
    a = _write(tmp_path / "a", b"data")
    missing = str(tmp_path / "missing")
    out = io.BytesIO()
    assert cat([missing, a], out) == 1
    assert out.getvalue() == f"{missing}: open failed\n".encode() + b"data"


def test_compare_identical(tmp_path):
    a = _write(tmp_path / "a", b"same bytes")
    b = _write(tmp_path / "b", b"same bytes")
    out = io.BytesIO()
    assert compare_files(a, b, out) == 0
    assert out.getvalue() == f"{a} and {b} are identical\n".encode()


def test_compare_reports_first_difference(tmp_path):
    a = _write(tmp_path / "a", b"abc")
    b = _write(tmp_path / "b", b"aXc")
    out = io.BytesIO()
    assert compare_files(a, b, out) == 1
    assert out.getvalue() == (
        f"Byte 1 is 62 ('b') in {a} but 58 ('X') in {b}\n".encode()
    )


def test_compare_shorter_file(tmp_path):
    a = _write(tmp_path / "a", b"ab")
    b = _write(tmp_path / "b", b"abcd")
    out = io.BytesIO()
    assert compare_files(a, b, out) == 0
    assert out.getvalue().startswith(f"{a} is shorter than {b}\n".encode())


def test_compare_missing_file(tmp_path):
    a = _write(tmp_path / "a", b"ab")
    missing = str(tmp_path / "nope")
    out = io.BytesIO()
    assert compare_files(a, missing, out) == 1
    assert out.getvalue() == f"{missing}: open failed\n".encode()


def test_copy_file_round_trip(tmp_path):
    data = bytes(range(256)) * 10
    src = _write(tmp_path / "src", data)
    dst = tmp_path / "dst"
    assert copy_file(src, str(dst), io.BytesIO()) == 0
    assert dst.read_bytes() == data


def test_copy_file_refuses_existing_destination(tmp_path):
    src = _write(tmp_path / "src", b"new")
    dst = _write(tmp_path / "dst", b"old")
    out = io.BytesIO()
    assert copy_file(src, dst, out) == 1
    assert out.getvalue() == f"{dst}: create failed\n".encode()
    assert (tmp_path / "dst").read_bytes() == b"old"


def test_copy_file_missing_source(tmp_path):
    missing = str(tmp_path / "missing")
    out = io.BytesIO()
    assert copy_file(missing, str(tmp_path / "dst"), out) == 1
    assert out.getvalue() == f"{missing}: open failed\n".encode()


def test_echo():
    out = io.BytesIO()
    assert echo(["echo", "hello", "world"], out) == 0
    assert out.getvalue() == b"echo hello world \n"


def test_lineup_upper_cases_in_place(tmp_path):
    path = tmp_path / "text"
    data = b"Mixed case, 123!\n" * 200
    path.write_bytes(data)
    assert lineup(str(path)) == 0
    assert path.read_bytes() == data.upper()


def test_lineup_missing_file(tmp_path):
    assert lineup(str(tmp_path / "missing")) == 2


def test_remove_files(tmp_path):
    a = _write(tmp_path / "a", b"1")
    missing = str(tmp_path / "missing")
    out = io.BytesIO()
    assert remove_files([a, missing], out) == 1
    assert not (tmp_path / "a").exists()
    assert out.getvalue() == f"{missing}: remove failed\n".encode()


def test_bubble_sort_matches_sorted():
    values = [5, -1, 3, 3, 0, 42, -7]
    assert bubble_sort(values) == sorted(values)
    assert values == [5, -1, 3, 3, 0, 42, -7]


def test_bubble_sort_descending_input():
    assert bubble_sort(range(127, -1, -1)) == list(range(128))


def test_matmult_properties():
    dim = 5
    result = matmult(dim)
    assert len(result) == dim and all(len(row) == dim for row in result)
    assert result[0] == [0] * dim
    assert result[1][1] == dim
    assert all(result[i][j] == result[j][i] for i in range(dim) for j in range(dim))


def test_main_cmp_usage(capsysbinary):
    assert main(["cmp", "only-one"]) == 1
    assert capsysbinary.readouterr().out == b"usage: cmp A B\n"


def test_main_cp_usage(capsysbinary):
    assert main(["cp"]) == 1
    assert capsysbinary.readouterr().out == b"usage: cp OLD NEW\n"


def test_main_bubsort(capsysbinary):
    assert main(["bubsort"]) == 0
    assert capsysbinary.readouterr().out == b"sort exiting with code 0\n"


def test_main_echo(capsysbinary):
    assert main(["echo", "x"]) == 0
    assert capsysbinary.readouterr().out == b"echo x \n"


def test_main_unknown_tool(capsysbinary):
    assert main(["frobnicate"]) == 1
    assert capsysbinary.readouterr().out.startswith(b"usage:")