"""Tests for the SM-2 style scheduler."""

from datetime import UTC, datetime, timedelta

import pytest
from flame.core.errors import InvalidQualityError, ItemNotFoundError
from flame.core.models import MIN_FACTOR, Item, Word
from flame.core.scheduler import (
    FlameScheduler,
    Quality,
    ReviewResult,
    interval_for,
    next_factor,
    next_state,
)
from flame.core.store import ItemStore


@pytest.fixture
def store():
    """Create an empty ItemStore for tests."""
    return ItemStore()


@pytest.fixture
def scheduler(store):
    """Create a FlameScheduler instance for tests."""
    return FlameScheduler(store)


def _word(name: str = "ephemeral") -> Word:
    return Word(word=name, detail=f"{name}.md")


class TestQuality:
    """Tests for Quality enum."""

    def test_quality_values(self):
        """Test quality enum values."""
        assert Quality.COMPLETE_BLACKOUT == 0
        assert Quality.INCORRECT == 1
        assert Quality.CORRECT_HARD == 3
        assert Quality.CORRECT == 4
        assert Quality.PERFECT == 5

    @pytest.mark.parametrize("raw", [0, 1, 3, 4, 5])
    def test_valid_raw_values(self, raw):
        """Valid raw values construct and keep their value."""
        assert int(Quality(raw)) == raw

    @pytest.mark.parametrize("raw", [2, 6, 255, -1])
    def test_invalid_raw_values(self, raw):
        """Grade 2 and out-of-range values are rejected."""
        with pytest.raises(InvalidQualityError) as exc_info:
            Quality(raw)
        assert exc_info.value.raw == raw

    def test_invalid_quality_is_value_error(self):
        with pytest.raises(ValueError):
            Quality(2)


class TestNextFactor:
    """Tests for the retention factor update."""

    def test_perfect_adds_a_tenth(self):
        assert next_factor(2.5, Quality.PERFECT) == pytest.approx(2.6)

    def test_correct_keeps_factor(self):
        assert next_factor(2.5, Quality.CORRECT) == pytest.approx(2.5)

    def test_blackout_drops_factor(self):
        assert next_factor(2.5, Quality.COMPLETE_BLACKOUT) == pytest.approx(1.7)

    def test_floor(self):
        """Factor never drops below the minimum."""
        factor = 2.5
        for _ in range(20):
            factor = next_factor(factor, Quality.COMPLETE_BLACKOUT)
            assert factor >= MIN_FACTOR
        assert factor == MIN_FACTOR


class TestIntervalFor:
    """Tests for the interval curve."""

    def test_base_cases(self):
        assert interval_for(0, 2.5) == 0
        assert interval_for(1, 2.5) == 1
        assert interval_for(2, 2.5) == 6

    def test_growth(self):
        """Each step multiplies by the factor and rounds up."""
        assert interval_for(3, 2.5) == 15
        assert interval_for(4, 2.5) == 38

    def test_rounds_up(self):
        assert interval_for(3, 1.3) == 8  # ceil(7.8)

    @pytest.mark.parametrize("factor", [1.3, 1.7, 2.5, 3.1])
    def test_non_decreasing(self, factor):
        """Intervals never shrink as repetitions grow."""
        intervals = [interval_for(n, factor) for n in range(1, 15)]
        assert intervals == sorted(intervals)


class TestNextState:
    """Tests for the pure review transition."""

    def test_new_item_perfect_is_a_lapse(self):
        """From the initial factor a perfect grade still leaves it below 3.0."""
        repetition, factor, interval = next_state(0, 2.5, Quality.PERFECT)
        assert factor == pytest.approx(2.6)
        assert repetition == 0
        assert interval == 0

    def test_success_increments_twice(self):
        """A review that keeps the factor at 3.0 or above bumps repetition by two."""
        repetition, factor, interval = next_state(0, 3.0, Quality.PERFECT)
        assert factor == pytest.approx(3.1)
        assert repetition == 2
        assert interval == 6

    def test_success_from_graduated_state(self):
        repetition, factor, interval = next_state(2, 3.5, Quality.PERFECT)
        assert repetition == 4
        assert factor == pytest.approx(3.6)
        assert interval == interval_for(4, factor)

    @pytest.mark.parametrize("quality", list(Quality))
    def test_lapse_resets(self, quality):
        """Any result factor below 3.0 resets repetition and makes the item due."""
        repetition, factor, interval = next_state(6, 2.0, quality)
        assert factor < 3.0
        assert repetition == 0
        assert interval == 0


class TestFlameScheduler:
    """Tests for FlameScheduler."""

    def test_review_missing_item(self, scheduler):
        with pytest.raises(ItemNotFoundError) as exc_info:
            scheduler.review_item(42, Quality.PERFECT)
        assert exc_info.value.key == 42

    def test_review_missing_item_is_key_error(self, scheduler):
        with pytest.raises(KeyError):
            scheduler.review_item(42, Quality.PERFECT)

    def test_review_new_item(self, store, scheduler):
        """Reviewing a new item updates it in place and reports the result."""
        key = store.introduce(_word())

        result = scheduler.review_item(key, Quality.PERFECT)

        assert isinstance(result, ReviewResult)
        assert result.key == key
        assert result.quality == Quality.PERFECT
        assert result.lapsed
        item = store.get(key)
        assert item.repetition == 0
        assert item.factor == pytest.approx(2.6)
        assert item.interval == 0

    def test_review_success_schedules_ahead(self, store, scheduler):
        key = store.introduce(_word())
        store.mem[key] = Item(factor=3.0, payload=_word())

        result = scheduler.review_item(key, Quality.CORRECT_HARD)

        # 3.0 - 0.14 drops below the lapse threshold
        assert result.lapsed
        assert store.get(key).interval == 0

        store.mem[key] = Item(factor=3.0, payload=_word())
        result = scheduler.review_item(key, Quality.PERFECT)
        assert not result.lapsed
        assert store.get(key).repetition == 2
        assert store.get(key).interval == 6

    def test_review_accepts_raw_int(self, store, scheduler):
        key = store.introduce(_word())
        result = scheduler.review_item(key, 4)
        assert result.quality == Quality.CORRECT

    def test_review_rejects_invalid_raw(self, store, scheduler):
        key = store.introduce(_word())
        with pytest.raises(InvalidQualityError):
            scheduler.review_item(key, 2)
        assert store.get(key).factor == 2.5

    def test_review_updates_version(self, store, scheduler):
        key = store.introduce(_word())
        store.version = datetime.now(UTC) - timedelta(days=3)
        before = store.version

        result = scheduler.review_item(key, Quality.CORRECT)

        assert store.version > before
        assert store.version == result.reviewed_at

    def test_repeated_blackouts_keep_floor(self, store, scheduler):
        key = store.introduce(_word())
        for _ in range(10):
            scheduler.review_item(key, Quality.COMPLETE_BLACKOUT)
            assert store.get(key).factor >= MIN_FACTOR
        assert store.get(key).factor == MIN_FACTOR

    def test_get_due_items(self, store, scheduler):
        key = store.introduce(_word())
        assert scheduler.get_due_items() == [key]
