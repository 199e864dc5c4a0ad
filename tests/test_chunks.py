import pytest

from tablesplit.shared.errors import InvalidConfiguration
from tablesplit.split.chunks import Chunk, num_of_chunks, plan_chunks


@pytest.mark.parametrize(
    "count,size,expected",
    [(0, 500, 0), (1, 500, 1), (10, 500, 1), (500, 500, 1), (501, 500, 2), (1000, 500, 2), (7, 3, 3)],
)
def test_num_of_chunks(count, size, expected):
    assert num_of_chunks(count, size) == expected


def test_num_of_chunks_rejects_zero_size():
    with pytest.raises(InvalidConfiguration):
        num_of_chunks(10, 0)


def test_plan_chunks_last_chunk_is_short():
    assert plan_chunks(7, 3) == [Chunk(0, 3), Chunk(3, 3), Chunk(6, 1)]


def test_plan_chunks_partition_the_range():
    for count in range(0, 40):
        for size in range(1, 12):
            chunks = plan_chunks(count, size)
            covered = [pos for chunk in chunks for pos in range(chunk.start, chunk.end)]
            assert covered == list(range(count))
            assert all(chunk.start % size == 0 for chunk in chunks)


def test_plan_chunks_empty():
    assert plan_chunks(0, 5) == []
