import pytest

from schedcore.errors import SimulationError
from schedcore.process import Process
from schedcore.readyqueue import QueueOrder, ReadyQueue
from schedcore.scheduler import Discipline


def make(name, arrival, cpu, remaining=None):
    p = Process(name, arrival, cpu, 0, 100)
    if remaining is not None:
        p.remaining_cpu_burst = remaining
    return p


def drain(queue):
    names = []
    while not queue.is_empty():
        names.append(queue.pop_front().name)
    return names


def test_fifo_keeps_insertion_order():
    q = ReadyQueue(QueueOrder.FIFO)
    for p in (make('c', 2, 1), make('a', 0, 9), make('b', 1, 5)):
        q.push(p)
    assert q.peek().name == 'c'
    assert len(q) == 3
    assert drain(q) == ['c', 'a', 'b']


def test_shortest_total_burst_breaks_ties_by_arrival():
    q = ReadyQueue(QueueOrder.SHORTEST_TOTAL_BURST)
    for p in (make('late', 4, 3), make('long', 0, 7), make('early', 1, 3), make('partly-run', 2, 5, remaining=1)):
        q.push(p)
    assert drain(q) == ['early', 'late', 'partly-run', 'long']


def test_shortest_remaining_burst_uses_remaining():
    q = ReadyQueue(QueueOrder.SHORTEST_REMAINING_BURST)
    for p in (make('x', 0, 10, remaining=2), make('y', 1, 3), make('z', 0, 4, remaining=2)):
        q.push(p)
    assert drain(q) == ['x', 'z', 'y']


def test_full_ties_fall_back_to_insertion_order():
    q = ReadyQueue(QueueOrder.SHORTEST_REMAINING_BURST)
    for name in ('first', 'second', 'third'):
        q.push(make(name, 0, 4))
    assert drain(q) == ['first', 'second', 'third']


def test_clear_and_empty_access():
    q = ReadyQueue(QueueOrder.SHORTEST_TOTAL_BURST)
    p = make('p', 0, 1)
    q.push(p)
    assert p in q
    q.clear()
    assert q.is_empty()
    assert p not in q
    with pytest.raises(SimulationError):
        q.pop_front()
    with pytest.raises(SimulationError):
        q.peek()


@pytest.mark.parametrize(
    'discipline,order',
    [
        (Discipline.SJF, QueueOrder.SHORTEST_TOTAL_BURST),
        (Discipline.SRTF, QueueOrder.SHORTEST_REMAINING_BURST),
        (Discipline.RR, QueueOrder.FIFO),
        (Discipline.VRR, QueueOrder.FIFO),
    ],
)
def test_discipline_queue_order(discipline, order):
    assert discipline.queue_order is order
