"""Tests for application/analyzers/disposable_transient.py."""

from dicheck.application.analyzers import DisposableTransientAnalyzer
from dicheck.domain.model.enums import Lifetime
from dicheck.domain.model.rule import Rule
from tests.factories import make_context, make_facts, make_factory_registration, make_registration, make_shape


def _analyze(registrations, shapes):
    return DisposableTransientAnalyzer().analyze(make_context(make_facts(tuple(registrations), tuple(shapes))))


class TestDisposableTransient:
    """Tests for DI008."""

    def test_disposable_transient_reported(self) -> None:
        diagnostics = _analyze(
            [make_registration("IConn", "Connection", Lifetime.TRANSIENT)],
            [make_shape("Connection", disposable=True)],
        )
        assert len(diagnostics) == 1
        assert diagnostics[0].rule is Rule.DISPOSABLE_TRANSIENT
        assert diagnostics[0].message == (
            "Transient service 'Connection' implements IDisposable but the container will not track or dispose it"
        )

    def test_async_disposable(self) -> None:
        diagnostics = _analyze(
            [make_registration("IConn", "Connection", Lifetime.TRANSIENT)],
            [make_shape("Connection", async_disposable=True)],
        )
        assert diagnostics[0].properties["interface"] == "IAsyncDisposable"

    def test_scoped_disposable_is_clean(self) -> None:
        diagnostics = _analyze(
            [make_registration("IConn", "Connection", Lifetime.SCOPED)],
            [make_shape("Connection", disposable=True)],
        )
        assert diagnostics == ()

    def test_non_effective_registration_checked(self) -> None:
        diagnostics = _analyze(
            [
                make_registration("IConn", "Connection", Lifetime.TRANSIENT, index=0),
                make_registration("IConn", "Connection", Lifetime.SCOPED, index=1),
            ],
            [make_shape("Connection", disposable=True)],
        )
        assert [d.location.line for d in diagnostics] == [1]

    def test_factory_skipped(self) -> None:
        diagnostics = _analyze(
            [make_factory_registration("IConn", Lifetime.TRANSIENT)],
            [make_shape("IConn", disposable=True)],
        )
        assert diagnostics == ()
