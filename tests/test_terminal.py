import subprocess

from cortex_panel.collaborators import terminal as terminal_module
from cortex_panel.collaborators.terminal import PersistentTerminal, shell_argv
from cortex_panel.command.builder import Command
from cortex_panel.core.config import TerminalSettings
from cortex_panel.core.state import EnvironmentDescriptor

LINUX = EnvironmentDescriptor(operating_system_family="linux")


class FakeStdin:
    def __init__(self, broken: bool = False) -> None:
        self.broken = broken
        self.lines: list[str] = []

    def write(self, text: str) -> None:
        if self.broken:
            raise BrokenPipeError
        self.lines.append(text)

    def flush(self) -> None:
        pass


class FakeProcess:
    def __init__(self, broken: bool = False) -> None:
        self.stdin = FakeStdin(broken)
        self.returncode = None
        self.terminated = False
        self.waited = False

    def poll(self):
        return self.returncode

    def terminate(self) -> None:
        self.terminated = True
        self.returncode = -15

    def wait(self, timeout=None):
        self.waited = True
        return self.returncode

    def kill(self) -> None:
        self.returncode = -9


class FakePopen:
    def __init__(self, *processes: FakeProcess) -> None:
        self.queue = list(processes)
        self.started: list[FakeProcess] = []
        self.kwargs: dict = {}

    def __call__(self, argv, **kwargs):
        self.kwargs = kwargs
        proc = self.queue.pop(0) if self.queue else FakeProcess()
        self.started.append(proc)
        return proc


def _terminal(popen: FakePopen) -> PersistentTerminal:
    return PersistentTerminal(TerminalSettings(name="Cortex"), LINUX, popen=popen)


def test_shell_argv_picks_wsl_on_windows_host() -> None:
    windows = EnvironmentDescriptor(operating_system_family="windows", wsl_available_hint=True)

    assert shell_argv(windows) == ["wsl.exe"]


def test_shell_argv_uses_bash_elsewhere(monkeypatch) -> None:
    monkeypatch.setattr(terminal_module.os.path, "exists", lambda _path: False)

    assert shell_argv(LINUX) == ["bash"]


def test_process_is_reused_while_alive() -> None:
    popen = FakePopen()
    terminal = _terminal(popen)

    terminal.send(Command(text="cortex status"))
    terminal.send(Command(text="cortex history"))

    assert len(popen.started) == 1
    assert popen.started[0].stdin.lines == ["cortex status\n", "cortex history\n"]
    assert popen.kwargs["stdin"] == subprocess.PIPE
    assert popen.kwargs["shell"] is False
    assert terminal.alive


def test_exited_process_is_recreated() -> None:
    popen = FakePopen()
    terminal = _terminal(popen)
    terminal.send(Command(text="cortex status"))
    popen.started[0].returncode = 0

    terminal.send(Command(text="cortex wizard"))

    assert len(popen.started) == 2
    assert popen.started[1].stdin.lines == ["cortex wizard\n"]


def test_broken_pipe_restarts_once() -> None:
    popen = FakePopen(FakeProcess(broken=True), FakeProcess())
    terminal = _terminal(popen)

    terminal.send(Command(text="cortex status"))

    assert len(popen.started) == 2
    assert popen.started[1].stdin.lines == ["cortex status\n"]
    assert popen.started[0].terminated
    assert popen.started[0].waited


def test_close_terminates_running_process() -> None:
    popen = FakePopen()
    terminal = _terminal(popen)
    terminal.send(Command(text="cortex status"))

    terminal.close()

    assert popen.started[0].terminated
    assert popen.started[0].waited
    assert not terminal.alive
