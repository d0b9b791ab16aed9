import subprocess

from odooprovisioner.services.identity import IdentityResolver
from odooprovisioner.services.python_env import VirtualEnvService


class DummyLogger:
    def info(self, *_args, **_kwargs):
        return None


class DummyConsole:
    def print(self, *_args, **_kwargs):
        return None


def _context(tmp_path):
    resolver = IdentityResolver(home_root=str(tmp_path))
    identity = resolver.resolve_identity("bob", "18.0", "8069", "https://github.com/acme/addons.git")
    return resolver.build_run_context(identity, admin_password="secret")


def _service(calls):
    def fake_run_cmd(cmd, **kwargs):
        calls.append((cmd, kwargs.get("as_user")))
        return subprocess.CompletedProcess(cmd, 0, stdout="", stderr="")

    return VirtualEnvService(logger=DummyLogger(), console=DummyConsole(), run_cmd=fake_run_cmd)


def test_ensure_venv_creates_environment_as_instance_user(tmp_path):
    calls = []
    context = _context(tmp_path)

    _service(calls).ensure_venv(context)

    assert calls == [(["python3", "-m", "venv", context.venv_dir], "bob")]


def test_ensure_venv_rebuilds_directory_without_interpreter(tmp_path):
    calls = []
    context = _context(tmp_path)
    (tmp_path / "bob" / "odoo" / "venv").mkdir(parents=True)

    _service(calls).ensure_venv(context)

    assert calls == [(["python3", "-m", "venv", context.venv_dir], "bob")]


def test_ensure_venv_skips_complete_environment(tmp_path):
    calls = []
    context = _context(tmp_path)
    interpreter = tmp_path / "bob" / "odoo" / "venv" / "bin" / "python3"
    interpreter.parent.mkdir(parents=True)
    interpreter.write_text("", encoding="utf-8")

    _service(calls).ensure_venv(context)

    assert calls == []
