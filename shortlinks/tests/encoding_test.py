import random

import pytest

from shortlinks.core.errors import Conflict, Exhausted, InvalidInput
from shortlinks.utils.encoding import (
    ALPHABET,
    CodeGenerator,
    GeneratedCode,
    RESERVED_CODES,
    VanityCode,
    code_request,
    normalize_short_code,
)


def test_alphabet_has_no_lookalikes():
    for ch in "0o1li":
        assert ch not in ALPHABET


def test_generate_uses_injected_rng():
    first = CodeGenerator(random.Random(99)).generate(lambda code: False)
    second = CodeGenerator(random.Random(99)).generate(lambda code: False)
    assert first == second
    assert len(first) == 6
    assert set(first) <= set(ALPHABET)


def test_generate_retries_until_free():
    seen = []

    def exists(code):
        seen.append(code)
        return len(seen) < 3

    code = CodeGenerator(random.Random(5), length=8).generate(exists)
    assert len(seen) == 3
    assert code == seen[-1]
    assert len(code) == 8


def test_generate_gives_up_when_saturated():
    calls = []

    def exists(code):
        calls.append(code)
        return True

    with pytest.raises(Exhausted):
        CodeGenerator(random.Random(5), max_attempts=4).generate(exists)
    assert len(calls) == 4


def test_normalize_short_code():
    assert normalize_short_code("  AbC1 ") == "abc1"


@pytest.mark.parametrize("vanity", [None, "", "   "])
def test_code_request_without_vanity(vanity):
    assert code_request(vanity) == GeneratedCode()


def test_code_request_with_vanity():
    assert code_request(" azFunc ") == VanityCode("azfunc")
    assert code_request("my-link_2") == VanityCode("my-link_2")


@pytest.mark.parametrize("vanity", ["with space", "a/b", "ünï", "x" * 33])
def test_code_request_rejects_bad_vanity(vanity):
    with pytest.raises(InvalidInput):
        code_request(vanity, max_length=32)


def test_code_request_refuses_route_names():
    for vanity in sorted(RESERVED_CODES - {"openapi.json"}):
        with pytest.raises(Conflict):
            code_request(vanity.upper())
    # Dots are not vanity characters in the first place
    with pytest.raises(InvalidInput):
        code_request("openapi.json")
    assert code_request("healthy") == VanityCode("healthy")
