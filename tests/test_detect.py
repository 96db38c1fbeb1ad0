from pathlib import Path

from cortex_panel.environment.detect import detect_environment, wsl_available


def test_plain_linux_host() -> None:
    descriptor = detect_environment(env={}, system_name="Linux")

    assert descriptor.operating_system_family == "linux"
    assert descriptor.remote_context_kind == "none"
    assert descriptor.wsl_available_hint is False


def test_linux_inside_wsl() -> None:
    descriptor = detect_environment(env={"WSL_DISTRO_NAME": "Ubuntu"}, system_name="Linux")

    assert descriptor.remote_context_kind == "wsl"


def test_ssh_session_and_container_hints() -> None:
    assert detect_environment(env={"SSH_CONNECTION": "1 2 3 4"}, system_name="Linux").remote_context_kind == "ssh-remote"
    assert detect_environment(env={"REMOTE_CONTAINERS": "true"}, system_name="Linux").remote_context_kind == "dev-container"


def test_darwin_and_unknown_systems() -> None:
    assert detect_environment(env={}, system_name="Darwin").operating_system_family == "macos"
    assert detect_environment(env={}, system_name="FreeBSD").operating_system_family == "other"


def test_windows_wsl_hint_from_env() -> None:
    descriptor = detect_environment(env={"WSLENV": "PATH/l"}, system_name="Windows")

    assert descriptor.operating_system_family == "windows"
    assert descriptor.wsl_available_hint is True


def test_wsl_hint_from_executable(tmp_path: Path) -> None:
    exe = tmp_path / "wsl.exe"
    assert wsl_available({}, exe) is False

    exe.write_text("", encoding="utf-8")
    assert wsl_available({}, exe) is True


def test_override_wins_and_unknown_override_is_ignored() -> None:
    assert detect_environment(env={}, system_name="Windows", remote_override="SSH-Remote").remote_context_kind == "ssh-remote"
    assert detect_environment(env={}, system_name="Linux", remote_override="cloud").remote_context_kind == "none"
