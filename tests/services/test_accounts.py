import subprocess

from odooprovisioner.services.accounts import AccountService
from odooprovisioner.services.filesystem import FileSystemService
from odooprovisioner.services.identity import IdentityResolver


class DummyLogger:
    def info(self, *_args, **_kwargs):
        return None

    def debug(self, *_args, **_kwargs):
        return None

    def warning(self, *_args, **_kwargs):
        return None


class DummyConsole:
    def print(self, *_args, **_kwargs):
        return None


class FakeRunCmd:
    def __init__(self, returncodes=None, stdout=None):
        self.calls = []
        self.returncodes = returncodes or {}
        self.stdout = stdout or {}

    def __call__(self, cmd, check=True, capture_output=False, as_user=None, cwd=None, env=None):
        self.calls.append({"cmd": list(cmd), "as_user": as_user})
        return subprocess.CompletedProcess(
            cmd,
            self.returncodes.get(cmd[0], 0),
            stdout=self.stdout.get(cmd[0], ""),
            stderr="",
        )

    def commands(self):
        return [call["cmd"] for call in self.calls]


def _context(tmp_path):
    resolver = IdentityResolver(home_root=str(tmp_path))
    identity = resolver.resolve_identity("bob", "18.0", "8069", "https://github.com/acme/addons.git")
    return resolver.build_run_context(identity, admin_password="secret")


def _service(run_cmd):
    filesystem = FileSystemService(logger=DummyLogger(), run_cmd=run_cmd)
    return AccountService(
        logger=DummyLogger(),
        console=DummyConsole(),
        run_cmd=run_cmd,
        filesystem_service=filesystem,
    )


def test_ensure_system_user_creates_missing_group_and_user(tmp_path):
    run_cmd = FakeRunCmd(returncodes={"getent": 2, "id": 1})

    _service(run_cmd).ensure_system_user(_context(tmp_path))

    commands = run_cmd.commands()
    assert ["addgroup", "--system", "bob"] in commands
    adduser = next(cmd for cmd in commands if cmd[0] == "adduser")
    assert adduser[-1] == "bob"
    assert str(tmp_path / "bob") in adduser
    assert ["usermod", "-L", "bob"] in commands


def test_ensure_system_user_only_fixes_membership_when_user_exists(tmp_path):
    run_cmd = FakeRunCmd()

    _service(run_cmd).ensure_system_user(_context(tmp_path))

    commands = run_cmd.commands()
    assert not any(cmd[0] in ("addgroup", "adduser") for cmd in commands)
    assert ["usermod", "-a", "-G", "bob", "bob"] in commands


def test_ensure_db_role_skips_existing_role(tmp_path):
    run_cmd = FakeRunCmd(stdout={"psql": "1\n"})

    _service(run_cmd).ensure_db_role("bob")

    assert not any(call["cmd"][0] == "createuser" for call in run_cmd.calls)
    assert all(call["as_user"] == "postgres" for call in run_cmd.calls)


def test_ensure_db_role_creates_missing_role_as_postgres(tmp_path):
    run_cmd = FakeRunCmd(stdout={"psql": ""})

    _service(run_cmd).ensure_db_role("bob")

    createuser = next(call for call in run_cmd.calls if call["cmd"][0] == "createuser")
    assert createuser["cmd"] == ["createuser", "--createdb", "--superuser", "--no-createrole", "bob"]
    assert createuser["as_user"] == "postgres"


def test_set_db_role_timezone_quotes_role_name():
    run_cmd = FakeRunCmd()

    _service(run_cmd).set_db_role_timezone("odoo-prod", "Asia/Riyadh")

    assert run_cmd.commands() == [
        ["psql", "-c", "ALTER USER \"odoo-prod\" SET TIMEZONE = 'Asia/Riyadh';"]
    ]


def test_ensure_ssh_keypair_generates_once_but_always_fixes_ownership(tmp_path):
    context = _context(tmp_path)
    run_cmd = FakeRunCmd()
    service = _service(run_cmd)

    service.ensure_ssh_keypair(context)

    keygen_calls = [call for call in run_cmd.calls if call["cmd"][0] == "ssh-keygen"]
    assert len(keygen_calls) == 1
    assert keygen_calls[0]["as_user"] == "bob"
    assert (tmp_path / "bob" / ".ssh").is_dir()
    assert oct((tmp_path / "bob" / ".ssh").stat().st_mode & 0o777) == oct(0o700)

    (tmp_path / "bob" / ".ssh" / "id_rsa").write_text("key", encoding="utf-8")
    (tmp_path / "bob" / ".ssh" / "id_rsa.pub").write_text("pub", encoding="utf-8")
    run_cmd.calls.clear()

    service.ensure_ssh_keypair(context)

    assert not any(call["cmd"][0] == "ssh-keygen" for call in run_cmd.calls)
    assert ["chown", "-R", "bob:bob", context.ssh_dir] in run_cmd.commands()


def test_ensure_ssh_keypair_regenerates_lone_private_key(tmp_path):
    context = _context(tmp_path)
    run_cmd = FakeRunCmd()
    ssh_dir = tmp_path / "bob" / ".ssh"
    ssh_dir.mkdir(parents=True)
    (ssh_dir / "id_rsa").write_text("half-written", encoding="utf-8")

    _service(run_cmd).ensure_ssh_keypair(context)

    assert not (ssh_dir / "id_rsa").exists()
    keygen_calls = [call for call in run_cmd.calls if call["cmd"][0] == "ssh-keygen"]
    assert len(keygen_calls) == 1
    assert str(ssh_dir / "id_rsa") in keygen_calls[0]["cmd"]
