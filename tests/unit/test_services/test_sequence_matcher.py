"""Unit tests for the game-mode match policies."""
import pytest

from handsign.core.entities import OutcomeKind, RankLevel, SequenceTarget
from handsign.core.exceptions import SequenceConfigError, SessionError
from handsign.services.sequence_matcher import (
    CurriculumPolicy, FullMatchPolicy, GameMode, SignDrillPolicy, StepPolicy, create_policy
)

TWO_TARGETS = [
    SequenceTarget(name="A", sequence=("x", "y")),
    SequenceTarget(name="B", sequence=("x", "z")),
]


def advance_all(policy, labels):
    return [policy.advance(label) for label in labels]


class TestFullMatchPolicy:
    """Test suite for exploration mode matching."""

    def test_matches_first_target(self):
        outcomes = advance_all(FullMatchPolicy(TWO_TARGETS), ["x", "y"])
        assert outcomes[0].kind is OutcomeKind.NONE
        assert outcomes[1].kind is OutcomeKind.MATCHED
        assert outcomes[1].target == "A"
        assert outcomes[1].committed == ("x", "y")

    def test_matches_second_target(self):
        outcomes = advance_all(FullMatchPolicy(TWO_TARGETS), ["x", "z"])
        assert [o.target for o in outcomes if o.is_event] == ["B"]

    def test_prefix_does_not_match(self):
        outcome = FullMatchPolicy(TWO_TARGETS).advance("x")
        assert not outcome.is_event

    def test_buffer_kept_after_match(self):
        policy = FullMatchPolicy(TWO_TARGETS)
        advance_all(policy, ["x", "y"])
        assert policy.buffer == ["x", "y"]
        # longer buffer no longer equals any target
        assert not policy.advance("z").is_event

    def test_signal_lost_clears_buffer(self):
        policy = FullMatchPolicy(TWO_TARGETS)
        advance_all(policy, ["x", "x"])
        policy.on_signal_lost()
        assert policy.buffer == []
        assert advance_all(policy, ["x", "z"])[-1].target == "B"


class TestStepPolicy:
    """Test suite for practice mode progression."""

    def test_stray_label_ignored(self, clock):
        policy = StepPolicy(SequenceTarget(name="T", sequence=("x", "y", "z"), target_id="t"), clock=clock)
        policy.start()

        outcomes = advance_all(policy, ["x", "w", "y"])
        assert [o.kind for o in outcomes] == [OutcomeKind.STEP, OutcomeKind.NONE, OutcomeKind.STEP]
        assert policy.expected_label == "z"

        clock.advance(3.456)
        done = policy.advance("z")
        assert done.kind is OutcomeKind.COMPLETED
        assert done.target == "t"
        assert done.elapsed_seconds == pytest.approx(3.46)
        assert not policy.active

    def test_inactive_until_started(self, clock):
        policy = StepPolicy(SequenceTarget(name="T", sequence=("x",)), clock=clock)
        assert policy.advance("x").kind is OutcomeKind.NONE
        assert policy.expected_label is None

    def test_completed_policy_ignores_labels(self, clock):
        policy = StepPolicy(SequenceTarget(name="T", sequence=("x",)), clock=clock)
        policy.start()
        assert policy.advance("x").kind is OutcomeKind.COMPLETED
        assert policy.advance("x").kind is OutcomeKind.NONE

    def test_reset_restarts_attempt(self, clock):
        policy = StepPolicy(SequenceTarget(name="T", sequence=("x", "y")), clock=clock)
        policy.start()
        policy.advance("x")
        clock.advance(10)
        policy.reset()
        assert policy.step_index == 0
        assert policy.elapsed_seconds == 0.0


class TestCurriculumPolicy:
    """Test suite for exam mode."""

    def test_rank_one_then_rank_two(self, catalog):
        policy = CurriculumPolicy(catalog, rank=0)
        policy.start()
        assert policy.current_target.key == "a"

        # chunin targets cannot be attempted before genin is passed
        assert policy.advance("Uma").kind is OutcomeKind.NONE

        outcomes = advance_all(policy, ["Tora", "I"])
        assert outcomes[-1].kind is OutcomeKind.TARGET_COMPLETED
        assert outcomes[-1].step_index == 1
        assert policy.current_target.key == "b"

        outcomes = advance_all(policy, ["Inu", "Mi", "Ne"])
        assert outcomes[-1].kind is OutcomeKind.RANK_PASSED
        assert outcomes[-1].rank == 1
        assert policy.completed_targets == ["a", "b"]
        assert not policy.active
        assert policy.advance("Uma").kind is OutcomeKind.NONE

        policy.start()
        assert policy.current_level.key == "chunin"
        outcomes = advance_all(policy, ["Uma", "Tora"])
        assert outcomes[-1].kind is OutcomeKind.RANK_PASSED
        assert outcomes[-1].rank == 2

    def test_wrong_label_keeps_position(self, catalog):
        policy = CurriculumPolicy(catalog)
        policy.start()
        advance_all(policy, ["Tora", "Ne", "Mi"])
        assert policy.step_index == 1

    def test_start_at_max_rank(self, catalog):
        policy = CurriculumPolicy(catalog, rank=4)
        with pytest.raises(SessionError):
            policy.start()

    def test_start_level_without_targets(self, catalog):
        policy = CurriculumPolicy(catalog, rank=2)
        with pytest.raises(SequenceConfigError):
            policy.start()

    def test_custom_levels(self, catalog):
        levels = [RankLevel(1, "chunin", "Chunin", "Only level")]
        policy = CurriculumPolicy(catalog, levels=levels)
        policy.start()
        assert [t.key for t in policy.targets] == ["c"]
        assert policy.max_rank == 1

    @pytest.mark.parametrize("rank", [-1, 5])
    def test_invalid_rank(self, catalog, rank):
        with pytest.raises(ValueError):
            CurriculumPolicy(catalog, rank=rank)


class TestSignDrillPolicy:

    def test_matches_selected_sign_once(self):
        policy = SignDrillPolicy("Tora")
        assert policy.advance("Mi").kind is OutcomeKind.NONE
        assert policy.advance("Tora").kind is OutcomeKind.MATCHED
        assert policy.advance("Tora").kind is OutcomeKind.NONE

        policy.select("Mi")
        assert policy.advance("Mi").target == "Mi"

    def test_no_sign_selected(self):
        assert SignDrillPolicy().advance("Tora").kind is OutcomeKind.NONE


class TestCreatePolicy:

    def test_modes(self, catalog, clock):
        assert isinstance(create_policy("learn", target="Tora"), SignDrillPolicy)
        assert isinstance(create_policy(GameMode.EXPLORE, catalog), FullMatchPolicy)
        assert isinstance(create_policy("exam", catalog, rank=1), CurriculumPolicy)

        practice = create_policy("practice", catalog, target="Gamma", clock=clock)
        assert isinstance(practice, StepPolicy)
        assert practice.active
        assert practice.expected_label == "Uma"

    def test_missing_requirements(self, catalog):
        with pytest.raises(ValueError):
            create_policy("explore")
        with pytest.raises(ValueError):
            create_policy("practice", catalog)
        with pytest.raises(ValueError):
            create_policy("sparring", catalog)
        with pytest.raises(KeyError):
            create_policy("practice", catalog, target="nope")
