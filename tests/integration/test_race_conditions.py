# tests/integration/test_race_conditions.py
# Copyright (c) 2024 Brad Edwards
# Licensed under the MIT License - see LICENSE file for details

import threading
from concurrent.futures import ThreadPoolExecutor

from termcast.core.errors import DuplicateCastError
from termcast.core.operation import Cast
from termcast.runtime.environment import TypingEnvironment

NUM_THREADS = 16


def _run_together(fn, count=NUM_THREADS):
    """Start ``count`` calls of ``fn`` at the same moment and collect their outcomes."""
    barrier = threading.Barrier(count)

    def _call(index):
        barrier.wait()
        try:
            return ("ok", fn(index))
        except Exception as e:
            return ("error", e)

    with ThreadPoolExecutor(max_workers=count) as pool:
        return list(pool.map(_call, range(count)))


def test_concurrent_type_of_creates_one_type():
    env = TypingEnvironment()

    class Payload:
        pass

    results = _run_together(lambda _: env.type_of(Payload))

    types = {id(value) for status, value in results}
    assert all(status == "ok" for status, _ in results)
    assert len(types) == 1
    assert len(env.root.children()) == 1


def test_concurrent_register_exactly_one_wins():
    env = TypingEnvironment()
    int_type, str_type = env.type_of(int), env.type_of(str)
    casts = [Cast.elementwise(f"cast{i}", int_type, str_type, str) for i in range(NUM_THREADS)]

    results = _run_together(lambda i: env.register(casts[i]))

    winners = [i for i, (status, _) in enumerate(results) if status == "ok"]
    losers = [value for status, value in results if status == "error"]
    assert len(winners) == 1
    assert all(isinstance(e, DuplicateCastError) for e in losers)
    assert int_type.cast_to(str_type) is casts[winners[0]]


def test_concurrent_subtype_get_or_create():
    env = TypingEnvironment()
    results = _run_together(lambda _: env.subtype(env.root, "shared", int))
    assert len({id(value) for _, value in results}) == 1


def test_reads_during_writes():
    env = TypingEnvironment()
    int_type = env.type_of(int)
    stop = threading.Event()
    errors = []

    def _reader():
        while not stop.is_set():
            try:
                env.types()
                env.cast_table()
                env.find_type(int)
            except Exception as e:
                errors.append(e)
                return

    reader = threading.Thread(target=_reader)
    reader.start()
    try:
        for i in range(200):
            target = env.type_of(type(f"T{i}", (), {}))
            env.register(Cast.elementwise(f"c{i}", int_type, target, lambda x: x))
    finally:
        stop.set()
        reader.join()

    assert errors == []
    assert len(env.cast_table()) == 200
