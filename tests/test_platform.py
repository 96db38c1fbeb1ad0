import itertools
from typing import get_args

import pytest

from cortex_panel.core.state import (
    EnvironmentDescriptor,
    OperatingSystemFamily,
    RemoteContextKind,
)
from cortex_panel.environment.platform import (
    LINUX_REQUIRED,
    MACOS_UNSUPPORTED,
    WINDOWS_REMEDIATION,
    WSL_ADVISORY,
    resolve_platform,
)


def _descriptor(family: str, remote: str = "none", wsl: bool = False) -> EnvironmentDescriptor:
    return EnvironmentDescriptor(
        operating_system_family=family,  # type: ignore[arg-type]
        remote_context_kind=remote,  # type: ignore[arg-type]
        wsl_available_hint=wsl,
    )


def test_native_linux_is_supported() -> None:
    verdict = resolve_platform(_descriptor("linux"))

    assert verdict.supported is True
    assert verdict.platform_tag == "linux"
    assert verdict.reason_message == ""


def test_windows_with_wsl_is_supported_with_advisory() -> None:
    verdict = resolve_platform(_descriptor("windows", wsl=True))

    assert verdict.supported is True
    assert verdict.platform_tag == "wsl"
    assert verdict.reason_message == WSL_ADVISORY


def test_windows_without_wsl_names_wsl_installation() -> None:
    verdict = resolve_platform(_descriptor("windows"))

    assert verdict.supported is False
    assert verdict.platform_tag == "windows"
    assert verdict.reason_message == WINDOWS_REMEDIATION
    assert "WSL" in verdict.reason_message


def test_macos_is_unsupported() -> None:
    verdict = resolve_platform(_descriptor("macos"))

    assert verdict.supported is False
    assert verdict.platform_tag == "macos"
    assert verdict.reason_message == MACOS_UNSUPPORTED


def test_unknown_os_requires_linux() -> None:
    verdict = resolve_platform(_descriptor("other"))

    assert verdict.supported is False
    assert verdict.platform_tag == "unknown"
    assert verdict.reason_message == LINUX_REQUIRED


@pytest.mark.parametrize(
    ("remote", "tag"),
    [
        ("wsl", "wsl"),
        ("ssh-remote", "linux"),
        ("dev-container", "linux"),
        ("attached-container", "linux"),
    ],
)
@pytest.mark.parametrize("family", ["windows", "macos", "other", "linux"])
def test_remote_context_overrides_local_os(family: str, remote: str, tag: str) -> None:
    verdict = resolve_platform(_descriptor(family, remote=remote))

    assert verdict.supported is True
    assert verdict.platform_tag == tag


def test_resolver_is_total_and_deterministic() -> None:
    combos = itertools.product(
        get_args(OperatingSystemFamily), get_args(RemoteContextKind), (True, False)
    )
    for family, remote, wsl in combos:
        descriptor = _descriptor(family, remote, wsl)
        first = resolve_platform(descriptor)
        assert first == resolve_platform(descriptor)
        assert first.supported == (first.platform_tag in {"linux", "wsl"})
