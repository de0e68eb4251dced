from procvisor.util import has_all_elements, in_array, is_same_string_array, sub


def test_in_array_found_and_missing():
    assert in_array("b", ["a", "b", "c"]) is True
    assert in_array("z", ["a", "b", "c"]) is False


def test_in_array_empty():
    assert in_array(1, []) is False


def test_has_all_elements():
    assert has_all_elements(["a", "b", "c"], ["c", "a"]) is True
    assert has_all_elements(["a", "b"], ["a", "d"]) is False
    assert has_all_elements(["a"], []) is True


def test_sub_keeps_order_of_first():
    assert sub(["a", "b", "c", "d"], ["b", "d"]) == ["a", "c"]


def test_sub_with_nothing_removed():
    items = ["x", "y"]
    assert sub(items, []) == items
    assert sub([], items) == []


def test_sub_result_disjoint_from_second():
    first = ["p1", "p2", "p3", "p2"]
    second = ["p2"]
    result = sub(first, second)
    assert all(item not in second for item in result)
    assert all(item in first for item in result)


def test_is_same_string_array():
    assert is_same_string_array(["a", "b"], ["b", "a"]) is True
    assert is_same_string_array(["a", "b"], ["a"]) is False
    assert is_same_string_array(["a", "b"], ["a", "c"]) is False
    assert is_same_string_array([], []) is True