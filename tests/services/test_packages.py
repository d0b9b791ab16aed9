import subprocess

from odooprovisioner.services.packages import PackageService


class DummyLogger:
    def info(self, *_args, **_kwargs):
        return None


class DummyConsole:
    def print(self, *_args, **_kwargs):
        return None


class FakeRunCmd:
    def __init__(self):
        self.calls = []

    def __call__(self, cmd, check=True, capture_output=False, as_user=None, cwd=None, env=None):
        self.calls.append((list(cmd), env))
        return subprocess.CompletedProcess(cmd, 0, stdout="", stderr="")


def test_ensure_postgresql_skips_install_when_psql_is_available():
    run_cmd = FakeRunCmd()
    service = PackageService(
        logger=DummyLogger(),
        console=DummyConsole(),
        run_cmd=run_cmd,
        which=lambda _name: "/usr/bin/psql",
    )

    service.ensure_postgresql(["postgresql"])

    assert run_cmd.calls == []


def test_ensure_postgresql_installs_when_missing():
    run_cmd = FakeRunCmd()
    service = PackageService(
        logger=DummyLogger(),
        console=DummyConsole(),
        run_cmd=run_cmd,
        which=lambda _name: None,
    )

    service.ensure_postgresql(["postgresql", "postgresql-contrib"])

    commands = [cmd for cmd, _env in run_cmd.calls]
    assert commands == [
        ["apt-get", "update"],
        ["apt-get", "install", "-y", "postgresql", "postgresql-contrib"],
    ]
    assert all(env == {"DEBIAN_FRONTEND": "noninteractive"} for _cmd, env in run_cmd.calls)


def test_npm_install_global_passes_all_packages():
    run_cmd = FakeRunCmd()
    service = PackageService(logger=DummyLogger(), console=DummyConsole(), run_cmd=run_cmd)

    service.npm_install_global(("less", "less-plugin-clean-css"))

    assert run_cmd.calls == [(["npm", "install", "-g", "less", "less-plugin-clean-css"], None)]
