"""Unit tests for receipt number generation"""

import itertools
import re

import pytest

from efile.domain.documents import ReceiptNumberExhaustedError, ReceiptNumberGenerator

RECEIPT_PATTERN = re.compile(r"^EF\d{13}-[0-9A-F]{8}(-\d+)?$")


class TestReceiptNumberFormat:
    """Test the shape of generated receipt numbers"""

    def test_default_format(self):
        receipt = ReceiptNumberGenerator().generate(lambda candidate: False)
        assert RECEIPT_PATTERN.match(receipt), receipt

    def test_uses_clock_and_token(self):
        generator = ReceiptNumberGenerator(clock=lambda: 1767225600000, token_factory=lambda: "3FA85F64")
        assert generator.generate(lambda candidate: False) == "EF1767225600000-3FA85F64"

    def test_custom_prefix(self):
        generator = ReceiptNumberGenerator(prefix="RC", clock=lambda: 1, token_factory=lambda: "AAAAAAAA")
        assert generator.candidate() == "RC1-AAAAAAAA"

    def test_invalid_max_attempts(self):
        with pytest.raises(ValueError):
            ReceiptNumberGenerator(max_attempts=0)


class TestReceiptNumberCollisions:
    """Test collision handling with the suffix counter"""

    def test_collision_appends_counter_suffix(self):
        taken = {"EF1-AAAAAAAA", "EF1-AAAAAAAA-1"}
        generator = ReceiptNumberGenerator(clock=lambda: 1, token_factory=lambda: "AAAAAAAA")
        assert generator.generate(taken.__contains__) == "EF1-AAAAAAAA-2"

    def test_exhaustion_raises(self):
        generator = ReceiptNumberGenerator(max_attempts=3, clock=lambda: 1, token_factory=lambda: "AAAAAAAA")
        checked = []

        def always_taken(candidate):
            checked.append(candidate)
            return True

        with pytest.raises(ReceiptNumberExhaustedError):
            generator.generate(always_taken)
        assert checked == ["EF1-AAAAAAAA", "EF1-AAAAAAAA-1", "EF1-AAAAAAAA-2"]

    def test_ten_thousand_unique_under_forced_collisions(self):
        """10,000 sequential receipts stay unique while most candidates collide"""
        ticks = itertools.count()
        tokens = itertools.cycle(["AAAAAAAA", "BBBBBBBB"])
        generator = ReceiptNumberGenerator(
            # The clock advances only every 50 calls, so bases repeat ~25 times each
            clock=lambda: 1767225600000 + next(ticks) // 50,
            token_factory=lambda: next(tokens),
        )

        issued = set()
        collisions = 0
        for _ in range(10_000):
            receipt = generator.generate(issued.__contains__)
            if receipt.count("-") > 1:
                collisions += 1
            issued.add(receipt)

        assert len(issued) == 10_000
        assert collisions > 5_000
