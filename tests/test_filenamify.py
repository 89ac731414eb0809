import pytest

from bilisync.filenamify import filenamify


@pytest.mark.parametrize(
    ("given", "expected"),
    [
        ("foo/bar", "foo_bar"),
        ("foo//bar", "foo_bar"),
        ("//foo//bar//", "_foo_bar_"),
        ("foo\\bar", "foo_bar"),
        ("foo\\\\\\bar", "foo_bar"),
        (r"foo\\bar", "foo_bar"),
        (r"foo\\\\\\bar", "foo_bar"),
        ("////foo////bar////", "_foo_bar_"),
        ("foo\x00bar", "foo_bar"),
        ('"foo<>bar*', "_foo_bar_"),
        (".", "_"),
        ("..", "_"),
        ("./", "__"),
        ("../", "__"),
        ("../../foo/bar", "__.._foo_bar"),
        ("foo.bar.", "foo.bar_"),
        ("foo.bar..", "foo.bar_"),
        ("foo.bar...", "foo.bar_"),
        ("con", "con_"),
        ("com1", "com1_"),
        (":nul|", "_nul_"),
        ("foo/bar/nul", "foo_bar_nul"),
        ("file:///file.tar.gz", "file_file.tar.gz"),
        ("http://www.google.com", "http_www.google.com"),
        (
            "https://www.youtube.com/watch?v=dQw4w9WgXcQ",
            "https_www.youtube.com_watch_v=dQw4w9WgXcQ",
        ),
    ],
)
def test_filenamify(given, expected):
    assert filenamify(given) == expected


def test_result_has_no_reserved_characters():
    result = filenamify('a<b>c:d"e/f\\g|h?i*j\x01k\x7fl\x85m')
    assert not any(ch in result for ch in '<>:"/\\|?*')
    assert result.startswith("a_b")


def test_safe_name_is_unchanged():
    assert filenamify("关注_永雏塔菲") == "关注_永雏塔菲"