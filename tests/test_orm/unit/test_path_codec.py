"""物化路径编解码测试"""

import pytest

from ytree.orm.tree import (
    extract_ancestor_ids,
    drop_last_segment,
    compose_child_path,
    root_path,
    path_level,
    is_path_prefix,
    MalformedPathError,
    PathTooLongError,
)


class TestExtractAncestorIds:
    """extract_ancestor_ids 测试"""

    def test_extract(self):
        assert extract_ancestor_ids("1/2/3/") == [1, 2, 3]
        assert extract_ancestor_ids("7/") == [7]

    def test_empty_path(self):
        assert extract_ancestor_ids("") == []
        assert extract_ancestor_ids(None) == []

    @pytest.mark.parametrize("path", ["1/2", "1/a/", "1//2/", "/1/2/", "１/"])
    def test_malformed(self, path):
        with pytest.raises(MalformedPathError) as exc_info:
            extract_ancestor_ids(path)
        assert exc_info.value.path == path


class TestDropLastSegment:
    """drop_last_segment 测试"""

    def test_drop(self):
        assert drop_last_segment("1/2/3/") == "1/2/"
        assert drop_last_segment("12/345/") == "12/"

    def test_root(self):
        assert drop_last_segment("1/") == ""

    def test_empty(self):
        assert drop_last_segment("") == ""

    def test_malformed_raises(self):
        """末尾不是 "<数字>/" 时抛出异常，不静默返回原值"""
        with pytest.raises(MalformedPathError):
            drop_last_segment("1/2")
        with pytest.raises(MalformedPathError):
            drop_last_segment("1/x/")

    @pytest.mark.parametrize("path", ["1/a2/", "1/2a3/", "1/٣/"])
    def test_last_segment_must_be_ascii_id(self, path):
        """最后一段必须整段是 ASCII 数字"""
        with pytest.raises(MalformedPathError):
            drop_last_segment(path)


class TestComposeChildPath:
    """compose_child_path 测试"""

    def test_compose(self):
        assert compose_child_path("1/2/", 3) == "1/2/3/"
        assert compose_child_path("", 5) == "5/"

    def test_root_path(self):
        assert root_path(9) == "9/"

    def test_max_length(self):
        assert compose_child_path("1/", 2, max_length=4) == "1/2/"
        with pytest.raises(PathTooLongError) as exc_info:
            compose_child_path("1/2/", 3, max_length=5)
        assert exc_info.value.path == "1/2/3/"
        assert exc_info.value.max_length == 5

    def test_compose_then_drop(self):
        assert drop_last_segment(compose_child_path("4/8/", 15)) == "4/8/"


class TestPathHelpers:
    """path_level / is_path_prefix 测试"""

    def test_path_level(self):
        assert path_level("1/") == 0
        assert path_level("1/2/3/") == 2

    def test_is_path_prefix(self):
        assert is_path_prefix("1/", "1/2/")
        assert is_path_prefix("1/2/", "1/2/3/")
        assert not is_path_prefix("1/", "1/")
        assert not is_path_prefix("1/", "11/2/")
        assert not is_path_prefix("", "1/")
        assert not is_path_prefix("1/2/", "1/")
