"""Tests for the composition engine and resolve()."""

from __future__ import annotations

import pytest

from traitcore.behavior.compose import compose, resolve
from traitcore.behavior.definition import requires
from traitcore.behavior.encapsulate import behavior
from traitcore.errors import (
    BehaviorDefinitionError,
    ConflictError,
    DependencyTypeError,
    IncompatibleChainError,
    MissingImplementationError,
    UnexpectedResolutionError,
    UnknownPolicyError,
)
from traitcore.types import Policy


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------

CALLS: list[str] = []


class Performer:
    pass


class Musician(Performer):
    pass


class Athlete(Performer):
    pass


@behavior
class SingsSongs:
    def initialize(self):
        CALLS.append("SingsSongs.initialize")
        self._songs = []
        return "songs-ready"

    def add_song(self, name):
        self._songs.append(name)
        return self

    def songs(self):
        return list(self._songs)


@behavior
class HasAwards:
    def initialize(self):
        CALLS.append("HasAwards.initialize")
        self._awards = []
        return "awards-ready"

    def add_award(self, name):
        self._awards.append(name)
        return self

    def awards(self):
        return list(self._awards)


@behavior
class Introduces:
    def introduce(self):
        return f"{self.title()}, everybody"

    title = requires()


@behavior
class Titled:
    def title(self):
        return "Ladies and gentlemen"


@pytest.fixture(autouse=True)
def _clear_calls():
    CALLS.clear()
    yield
    CALLS.clear()


# ---------------------------------------------------------------------------
# Disjoint composition
# ---------------------------------------------------------------------------


class TestDisjoint:
    def test_union_of_public_surfaces(self):
        @behavior
        class Walks:
            def walk(self):
                return "walking"

        @behavior
        class Talks:
            def talk(self):
                return "talking"

        composed = compose(Walks, Talks)
        assert sorted(composed.methods) == ["talk", "walk"]
        assert composed.name == "Walks+Talks"
        assert composed.participants == ("Walks", "Talks")
        assert composed.contexts is None

    def test_single_participant(self):
        composed = compose(SingsSongs)
        assert set(composed.methods) == set(SingsSongs.methods)

    def test_accepts_list(self):
        composed = compose([SingsSongs, Titled], name="Show")
        assert composed.name == "Show"
        assert "title" in composed

    def test_empty_compose_rejected(self):
        with pytest.raises(ValueError):
            compose()

    def test_non_behavior_rejected(self):
        with pytest.raises(TypeError):
            compose(SingsSongs, {"walk": lambda self: None})


# ---------------------------------------------------------------------------
# Conflicts and resolution
# ---------------------------------------------------------------------------


class TestConflicts:
    def test_unresolved_conflict_names_method(self):
        with pytest.raises(ConflictError) as exc_info:
            compose(SingsSongs, HasAwards)
        assert exc_info.value.method_name == "initialize"
        assert exc_info.value.existing_from == "SingsSongs"
        assert exc_info.value.incoming_from == "HasAwards"
        assert "initialize" in str(exc_info.value)

    def test_after_runs_new_first_and_returns_existing(self):
        Singer = compose(SingsSongs, resolve(HasAwards, {"initialize": "after"}))
        singer = Singer.create_instance()

        result = singer.initialize()

        assert CALLS == ["HasAwards.initialize", "SingsSongs.initialize"]
        assert result == "songs-ready"
        singer.add_song("Fallen Angel").add_award("Grammy")
        assert singer.songs() == ["Fallen Angel"]
        assert singer.awards() == ["Grammy"]
        assert dict(Singer.resolved) == {"initialize": "after"}

    def test_before_runs_existing_first_and_returns_new(self):
        Singer = compose(SingsSongs, resolve(HasAwards, {"initialize": Policy.BEFORE}))
        result = Singer.create_instance().initialize()

        assert CALLS == ["SingsSongs.initialize", "HasAwards.initialize"]
        assert result == "awards-ready"

    def test_overwrite_keeps_first(self):
        Singer = compose(SingsSongs, resolve(HasAwards, {"initialize": "overwrite"}))
        assert Singer.create_instance().initialize() == "songs-ready"
        assert CALLS == ["SingsSongs.initialize"]

    def test_discard_keeps_second(self):
        Singer = compose(SingsSongs, resolve(HasAwards, {"initialize": "discard"}))
        assert Singer.create_instance().initialize() == "awards-ready"
        assert CALLS == ["HasAwards.initialize"]

    def test_around_receives_proceed(self):
        @behavior
        class Loud:
            def initialize(self, proceed):
                CALLS.append("Loud.enter")
                inner = proceed()
                CALLS.append("Loud.exit")
                return inner.upper()

        Singer = compose(SingsSongs, resolve(Loud, {"initialize": "around"}))
        assert Singer.create_instance().initialize() == "SONGS-READY"
        assert CALLS == ["Loud.enter", "SingsSongs.initialize", "Loud.exit"]

    def test_unexpected_resolution(self):
        @behavior
        class Dances:
            def dance(self):
                return "dancing"

        with pytest.raises(UnexpectedResolutionError) as exc_info:
            compose(SingsSongs, resolve(Dances, {"dance": "before"}))
        assert exc_info.value.method_name == "dance"
        assert exc_info.value.policy == "before"

    def test_resolution_on_first_participant_is_unexpected(self):
        with pytest.raises(UnexpectedResolutionError):
            compose(resolve(SingsSongs, {"initialize": "after"}), HasAwards)

    def test_resolution_against_dependency_is_unexpected(self):
        @behavior
        class TitleOverride:
            def title(self):
                return "Folks"

        with pytest.raises(UnexpectedResolutionError):
            compose(Introduces, resolve(TitleOverride, {"title": "discard"}))

    def test_unknown_policy(self):
        with pytest.raises(UnknownPolicyError) as exc_info:
            compose(SingsSongs, resolve(HasAwards, {"initialize": "merge"}))
        assert exc_info.value.policy == "merge"
        assert exc_info.value.method_name == "initialize"


class TestResolve:
    def test_resolve_does_not_mutate_original(self):
        resolved = resolve(HasAwards, {"initialize": "after"})

        assert "initialize" in HasAwards.methods
        assert not HasAwards.resolutions
        assert "initialize" not in resolved.methods
        assert resolved.resolutions["initialize"].policy == "after"

    def test_resolved_copy_shares_contexts(self):
        resolved = resolve(HasAwards, {"initialize": "after"})
        assert resolved.contexts is HasAwards.contexts

    def test_resolve_can_retag(self):
        once = resolve(HasAwards, {"initialize": "after"})
        twice = resolve(once, {"initialize": "before"})
        assert twice.resolutions["initialize"].policy == "before"

    def test_resolve_unknown_method(self):
        with pytest.raises(BehaviorDefinitionError, match="sing"):
            resolve(HasAwards, {"sing": "after"})


# ---------------------------------------------------------------------------
# Private contexts after composition
# ---------------------------------------------------------------------------


class TestComposedContexts:
    def test_instances_are_isolated(self):
        Singer = compose(SingsSongs, resolve(HasAwards, {"initialize": "after"}))
        first = Singer.create_instance()
        second = Singer.create_instance()
        first.initialize()
        second.initialize()

        first.add_song("x")

        assert first.songs() == ["x"]
        assert second.songs() == []

    def test_each_participant_keeps_its_own_context(self):
        Singer = compose(SingsSongs, resolve(HasAwards, {"initialize": "after"}))
        singer = Singer.create_instance()
        singer.initialize()

        songs_ctx = SingsSongs.context_for(singer)
        awards_ctx = HasAwards.context_for(singer)
        assert songs_ctx is not awards_ctx
        assert not hasattr(songs_ctx, "_awards")

    def test_composed_behavior_has_no_own_context(self):
        Singer = compose(SingsSongs, Titled)
        with pytest.raises(TypeError, match="composed"):
            Singer.context_for(object())


# ---------------------------------------------------------------------------
# Dependencies
# ---------------------------------------------------------------------------


class TestDependencies:
    def test_dependency_satisfied_by_later_participant(self):
        Host = compose(Introduces, Titled)
        assert Host.dependencies == ()
        assert Host.create_instance().introduce() == "Ladies and gentlemen, everybody"

    def test_dependency_satisfied_by_earlier_participant(self):
        Host = compose(Titled, Introduces)
        assert Host.dependencies == ()
        assert Host.create_instance().introduce() == "Ladies and gentlemen, everybody"

    def test_dependency_carried_forward(self):
        @behavior
        class AlsoIntroduces:
            def reintroduce(self):
                return f"Once more, {self.title()}"

            title = requires()

        Host = compose(Introduces, AlsoIntroduces)
        assert Host.dependencies == ("title",)

    def test_missing_implementation_at_call_time(self):
        Host = compose(Introduces, SingsSongs)
        host = Host.create_instance()

        with pytest.raises(MissingImplementationError) as exc_info:
            host.introduce()
        assert exc_info.value.method_name == "title"

        with pytest.raises(MissingImplementationError):
            host.title()

    def test_dependency_satisfied_by_chain_root(self):
        class Stage:
            def title(self):
                return "Friends"

        Host = compose(Introduces.with_chain_root(Stage))
        assert Host.dependencies == ()
        assert Host.create_instance().introduce() == "Friends, everybody"

    def test_non_callable_chain_root_attribute(self):
        class Stage:
            title = "Friends"

        with pytest.raises(DependencyTypeError) as exc_info:
            compose(Introduces.with_chain_root(Stage), SingsSongs)
        assert exc_info.value.method_name == "title"
        assert exc_info.value.found == "Friends"


# ---------------------------------------------------------------------------
# Chain roots
# ---------------------------------------------------------------------------


class TestChainRoots:
    def test_root_adopted_from_participant(self):
        composed = compose(SingsSongs, Titled.with_chain_root(Musician))
        assert composed.chain_root is Musician

    def test_root_never_moves_up(self):
        composed = compose(SingsSongs.with_chain_root(Musician), Titled.with_chain_root(Performer))
        assert composed.chain_root is Musician
        assert isinstance(composed.create_instance(), Musician)

    def test_root_narrows(self):
        composed = compose(SingsSongs.with_chain_root(Performer), Titled.with_chain_root(Musician))
        assert composed.chain_root is Musician

    def test_sibling_root_rejected_and_previous_result_untouched(self):
        first = compose(SingsSongs.with_chain_root(Performer), Titled.with_chain_root(Musician))
        methods_before = dict(first.methods)

        @behavior(chain_root=Athlete)
        class Runs:
            def run(self):
                return "running"

        with pytest.raises(IncompatibleChainError) as exc_info:
            compose(first, Runs)

        assert exc_info.value.candidate_root is Athlete
        assert exc_info.value.accumulated_root is Musician
        assert exc_info.value.participant == "Runs"
        assert dict(first.methods) == methods_before
        assert first.chain_root is Musician

    def test_failed_compose_leaves_inputs_untouched(self):
        before = dict(SingsSongs.methods)
        with pytest.raises(ConflictError):
            compose(SingsSongs, Titled, HasAwards)
        assert dict(SingsSongs.methods) == before
        assert Titled.dependencies == ()

    def test_initialize_not_called_by_engine(self):
        compose(SingsSongs, resolve(HasAwards, {"initialize": "after"})).create_instance()
        assert CALLS == []
