"""Shared fixtures for seqflow tests."""

import operator

import pytest


@pytest.fixture
def is_even():
    return lambda x: x % 2 == 0


@pytest.fixture
def double():
    return lambda x: x * 2


@pytest.fixture
def add():
    return operator.add


@pytest.fixture
def counting_producer():
    """Factory building a producer that yields 1..limit then signals exhaustion."""

    def build(limit):
        def generator():
            state = {"n": 0}

            def pull():
                state["n"] += 1
                return state["n"], state["n"] <= limit

            return pull

        return generator

    return build
