import pytest

from app.oer.controller import partition_page_size


@pytest.mark.parametrize("source_count", range(1, 8))
@pytest.mark.parametrize("page_size", range(1, 31))
def test_limits_add_up_to_page_size(page_size, source_count):
    limits = partition_page_size(page_size, source_count)

    assert len(limits) == source_count
    assert sum(limits) == page_size
    assert limits[:-1] == [page_size // source_count] * (source_count - 1)
    assert limits[-1] == page_size // source_count + page_size % source_count


def test_two_sources_examples():
    assert partition_page_size(12, 2) == [6, 6]
    assert partition_page_size(13, 2) == [6, 7]


def test_remainder_goes_to_last_source():
    assert partition_page_size(12, 5) == [2, 2, 2, 2, 4]


def test_single_source_gets_whole_page():
    assert partition_page_size(12, 1) == [12]


@pytest.mark.parametrize("page_size,source_count", [(0, 1), (12, 0), (-1, 2)])
def test_rejects_invalid_arguments(page_size, source_count):
    with pytest.raises(ValueError):
        partition_page_size(page_size, source_count)
