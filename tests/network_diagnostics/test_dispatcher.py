"""
Unit tests for the DiagnosticsDispatcher class.

The checks are replaced by mocks: these tests cover routing and the
never-raise contract, the checks themselves are tested separately.
"""

from typing import Dict
from unittest.mock import AsyncMock

import pytest

from network_diagnostics.checks.dns_check import DnsLookupCheck
from network_diagnostics.checks.ping_check import PingCheck
from network_diagnostics.checks.port_check import PortCheck
from network_diagnostics.checks.ssl_check import SslCheck
from network_diagnostics.contracts import DiagnosticCheck
from network_diagnostics.dispatcher import DiagnosticsDispatcher, default_checks
from network_diagnostics.domain import DiagnosticKind, DiagnosticResult


@pytest.fixture
def checks() -> Dict[DiagnosticKind, AsyncMock]:
    """One mock check per kind, each answering with its own kind name."""
    mocks = {}
    for kind in DiagnosticKind:
        check = AsyncMock(spec=DiagnosticCheck)
        check.run.return_value = DiagnosticResult(f"{kind.value} done")
        mocks[kind] = check
    return mocks


@pytest.fixture
def dispatcher(checks: Dict[DiagnosticKind, AsyncMock]) -> DiagnosticsDispatcher:
    return DiagnosticsDispatcher(checks)


@pytest.mark.asyncio
@pytest.mark.parametrize("kind", list(DiagnosticKind))
async def test_run_should_route_each_kind_to_its_check(
    dispatcher: DiagnosticsDispatcher, checks: Dict[DiagnosticKind, AsyncMock], kind
) -> None:
    # Act
    result = await dispatcher.run(kind.value, "example.com", 8080)

    # Assert
    checks[kind].run.assert_awaited_once_with("example.com", 8080)
    assert result == DiagnosticResult(f"{kind.value} done")
    for other_kind, other_check in checks.items():
        if other_kind is not kind:
            other_check.run.assert_not_awaited()


@pytest.mark.asyncio
async def test_run_should_accept_enum_and_mixed_case_kinds(
    dispatcher: DiagnosticsDispatcher, checks: Dict[DiagnosticKind, AsyncMock]
) -> None:
    # Act
    await dispatcher.run(DiagnosticKind.SSL, "example.com")
    await dispatcher.run(" Ping ", "example.com")

    # Assert
    checks[DiagnosticKind.SSL].run.assert_awaited_once_with("example.com", None)
    checks[DiagnosticKind.PING].run.assert_awaited_once_with("example.com", None)


@pytest.mark.asyncio
async def test_run_should_describe_unsupported_kind_without_running_any_check(
    dispatcher: DiagnosticsDispatcher, checks: Dict[DiagnosticKind, AsyncMock]
) -> None:
    # Act
    result = await dispatcher.run("traceroute", "example.com")

    # Assert
    assert result.result == "Unsupported diagnostic kind: traceroute"
    for check in checks.values():
        check.run.assert_not_awaited()


@pytest.mark.asyncio
async def test_run_should_convert_unexpected_check_error_into_result(
    dispatcher: DiagnosticsDispatcher, checks: Dict[DiagnosticKind, AsyncMock]
) -> None:
    # Arrange
    checks[DiagnosticKind.PORT].run.side_effect = RuntimeError("boom")

    # Act
    result = await dispatcher.run("port", "example.com", 22)

    # Assert
    assert result.result == "port check failed: RuntimeError: boom"


@pytest.mark.asyncio
async def test_failing_lookup_should_not_affect_later_diagnostics_in_a_sequence(
    dispatcher: DiagnosticsDispatcher, checks: Dict[DiagnosticKind, AsyncMock]
) -> None:
    # Arrange
    checks[DiagnosticKind.NSLOOKUP].run.return_value = DiagnosticResult(
        "DNS Error: The DNS query name does not exist."
    )

    # Act
    results = [
        await dispatcher.run("nslookup", "does-not-exist.invalid"),
        await dispatcher.run("ping", "example.com"),
        await dispatcher.run("ssl", "example.com"),
    ]

    # Assert
    assert [result.result for result in results] == [
        "DNS Error: The DNS query name does not exist.",
        "ping done",
        "ssl done",
    ]


def test_supports_should_recognise_only_known_kinds(dispatcher: DiagnosticsDispatcher) -> None:
    assert dispatcher.supports("nslookup")
    assert dispatcher.supports(DiagnosticKind.PORT)
    assert not dispatcher.supports("traceroute")
    assert not dispatcher.supports(None)


def test_supports_should_reject_kinds_without_registered_check() -> None:
    # Arrange
    dispatcher = DiagnosticsDispatcher({DiagnosticKind.PING: AsyncMock(spec=DiagnosticCheck)})

    # Act & Assert
    assert dispatcher.supports("ping")
    assert not dispatcher.supports("ssl")


def test_default_checks_should_register_every_kind() -> None:
    # Act
    checks = default_checks()

    # Assert
    assert isinstance(checks[DiagnosticKind.NSLOOKUP], DnsLookupCheck)
    assert isinstance(checks[DiagnosticKind.PING], PingCheck)
    assert isinstance(checks[DiagnosticKind.PORT], PortCheck)
    assert isinstance(checks[DiagnosticKind.SSL], SslCheck)
