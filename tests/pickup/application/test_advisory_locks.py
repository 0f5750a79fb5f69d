"""Advisory lock adapters."""

import pytest

from pickup.locks.memory import InMemoryLocks
from pickup.locks.postgres import lock_key


class TestInMemoryLocks:
    def test_second_holder_is_refused(self):
        locks = InMemoryLocks()
        with locks.hold("job") as first:
            with locks.hold("job") as second:
                assert first is True
                assert second is False

    def test_names_are_independent(self):
        locks = InMemoryLocks()
        with locks.hold("a") as a, locks.hold("b") as b:
            assert a and b

    def test_released_on_exit(self):
        locks = InMemoryLocks()
        with locks.hold("job"):
            assert locks.is_held("job")
        assert not locks.is_held("job")

    def test_released_when_body_raises(self):
        locks = InMemoryLocks()
        with pytest.raises(RuntimeError):
            with locks.hold("job"):
                raise RuntimeError("boom")
        assert not locks.is_held("job")

    def test_refused_holder_does_not_release_owner(self):
        locks = InMemoryLocks()
        with locks.hold("job"):
            with locks.hold("job"):
                pass
            assert locks.is_held("job")
        assert locks.acquisitions == ["job"]


class TestLockKey:
    def test_thank_you_job_keeps_its_key(self):
        assert lock_key("thank-completed") == 922338

    def test_other_names_are_stable(self):
        assert lock_key("remind-pickup") == lock_key("remind-pickup")
        assert lock_key("remind-pickup") != lock_key("thank-completed")
