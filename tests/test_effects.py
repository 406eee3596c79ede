from pacer import NONE, Batch, Dispatch, ScheduleAfter, batch
from pacer._effects import iter_effects


def test_batch_collapses() -> None:
    assert batch() is NONE
    assert batch(NONE, NONE) is NONE
    assert batch(Dispatch("a")) == Dispatch("a")
    assert batch(NONE, ScheduleAfter("a", 5)) == ScheduleAfter("a", 5)


def test_batch_flattens() -> None:
    inner = batch(Dispatch(1), ScheduleAfter(2, 10))
    outer = batch(inner, NONE, Dispatch(3))
    assert outer == Batch((Dispatch(1), ScheduleAfter(2, 10), Dispatch(3)))


def test_iter_effects() -> None:
    assert list(iter_effects(NONE)) == []
    assert list(iter_effects(Dispatch(1))) == [Dispatch(1)]
    nested = Batch((Dispatch(1), Batch((NONE, ScheduleAfter(2, 0))), NONE))
    assert list(iter_effects(nested)) == [Dispatch(1), ScheduleAfter(2, 0)]


def test_none_repr() -> None:
    assert repr(NONE) == "NONE"
