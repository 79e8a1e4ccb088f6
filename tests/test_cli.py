"""
Tests for the auth CLI commands, run against the fake auth service.
"""

import pytest

import auth_cli


def parse(*argv):
    return auth_cli.build_parser().parse_args(list(argv))


class TestCommands:
    @pytest.mark.asyncio
    async def test_login_with_password_flag(self, session, storage):
        code = await auth_cli.run_command(parse("login", "alice", "-p", "p1"), session)

        assert code == 0
        assert storage.get_token() == "T1"

    @pytest.mark.asyncio
    async def test_whoami_restores_stored_token(self, session, server, storage):
        server.issue("T7", {"username": "erin", "app": "app1"})
        storage.save_token("T7")

        code = await auth_cli.run_command(parse("whoami"), session)

        assert code == 0
        assert session.current_user.username == "erin"

    @pytest.mark.asyncio
    async def test_whoami_signed_out(self, session):
        assert await auth_cli.run_command(parse("whoami"), session) == 1

    @pytest.mark.asyncio
    async def test_request_sends_json_body(self, session, server, storage):
        server.issue("T7", {"username": "erin", "app": "app1"})
        storage.save_token("T7")

        code = await auth_cli.run_command(
            parse("request", "post", "/protected/items", "--json", '{"name": "x"}'), session
        )

        assert code == 0
        assert server.requests[-1].method == "POST"
        assert server.body() == {"name": "x"}
        assert server.requests[-1].headers["Authorization"] == "Bearer T7"

    @pytest.mark.asyncio
    async def test_logout(self, session, storage):
        storage.save_token("T1")

        assert await auth_cli.run_command(parse("logout"), session) == 0
        assert storage.get_token() is None


def test_main_reports_auth_errors(monkeypatch):
    async def failing(args):
        from auth_rocket import NotAuthenticated
        raise NotAuthenticated()

    monkeypatch.setattr(auth_cli, "_main_async", failing)
    monkeypatch.setattr(auth_cli, "setup_logging", lambda debug=False: None)

    assert auth_cli.main(["whoami"]) == 1
