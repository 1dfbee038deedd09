"""End-to-end tests of the connector over a real HTTP server."""

import pytest
from aiohttp import web
from aiohttp import test_utils

from cloudraid_connector.core.connector import ServerConnector
from cloudraid_connector.core.errors import ErrorKind, ServerError
from cloudraid_connector.core.models import ServerConnection

SESSION = "JSESSIONID=C0FFEE"
FILE_BODY = b"CloudRAID " * 2000


def build_app(received):
    """Minimal CloudRAID server keeping a single file."""
    sessions = set()

    def logged_in(request):
        return request.headers.get("Cookie") in sessions

    async def login(request):
        if request.headers.get("X-Username") != "alice" or request.headers.get("X-Password") != "s3cret":
            return web.Response(status=403)
        sessions.add(SESSION)
        return web.Response(status=202, headers={"Set-Cookie": f"{SESSION}; Path=/; HttpOnly"})

    async def logout(request):
        if "Cookie" not in request.headers:
            return web.Response(status=405)
        if not logged_in(request):
            return web.Response(status=401)
        sessions.discard(request.headers["Cookie"])
        return web.Response(status=200)

    async def listing(request):
        if not logged_in(request):
            return web.Response(status=401)
        return web.Response(
            status=200,
            text='"notes.txt","abc123","2012-05-31 10:42:07.0","UPLOADED"\r\n',
        )

    async def get_file(request):
        if not logged_in(request):
            return web.Response(status=401)
        if request.match_info["name"] != "notes.txt":
            return web.Response(status=404)
        return web.Response(status=200, body=FILE_BODY)

    async def put_file(request):
        if not logged_in(request):
            return web.Response(status=401)
        received["path"] = request.path
        received["content_length"] = request.headers.get("Content-Length")
        received["body"] = await request.read()
        return web.Response(status=201)

    app = web.Application()
    app.router.add_post("/user/auth/", login)
    app.router.add_get("/user/auth/logout/", logout)
    app.router.add_get("/list/", listing)
    app.router.add_get("/file/{name}/", get_file)
    app.router.add_put("/file/{name}/", put_file)
    app.router.add_put("/file/{name}/update/", put_file)
    return app


@pytest.mark.integration
class TestAiohttpTransport:
    """Test the connector with its default aiohttp transport."""

    @pytest.mark.asyncio
    async def test_full_session(self, tmp_path):
        received = {}
        async with test_utils.TestServer(build_app(received)) as server:
            connection = ServerConnection(host=server.host, user="alice", password="s3cret", port=server.port)

            async with ServerConnector(connection, temp_dir=tmp_path / "downloads") as connector:
                await connector.authenticate()
                assert connector.session == SESSION

                files = await connector.list_files()
                assert [f.name for f in files] == ["notes.txt"]
                assert files[0].state == "UPLOADED"

                downloaded = await connector.fetch_file("notes.txt")
                assert downloaded.read_bytes() == FILE_BODY

                upload = tmp_path / "upload.txt"
                upload.write_bytes(b"x" * 10000)
                await connector.send_file("upload.txt", upload, update=True)
                assert received["path"] == "/file/upload.txt/update/"
                assert received["content_length"] == "10000"
                assert received["body"] == b"x" * 10000

                with pytest.raises(ServerError) as exc_info:
                    await connector.fetch_file("other.txt")
                assert exc_info.value.kind is ErrorKind.FILE_NOT_FOUND

                await connector.end_session()
                assert not connector.is_authenticated

    @pytest.mark.asyncio
    async def test_wrong_password(self):
        async with test_utils.TestServer(build_app({})) as server:
            connection = ServerConnection(host=server.host, user="alice", password="wrong", port=server.port)

            async with ServerConnector(connection) as connector:
                with pytest.raises(ServerError) as exc_info:
                    await connector.authenticate()

        assert exc_info.value.kind is ErrorKind.INVALID_CREDENTIALS
        assert exc_info.value.status == 403

    @pytest.mark.asyncio
    async def test_cookie_not_managed_by_session(self):
        async with test_utils.TestServer(build_app({})) as server:
            connection = ServerConnection(host=server.host, user="alice", password="s3cret", port=server.port)

            async with ServerConnector(connection) as connector:
                await connector.authenticate()
                await connector.end_session()

                # Without a token nothing may carry the old cookie along
                with pytest.raises(ServerError) as exc_info:
                    await connector.end_session()

        assert exc_info.value.kind is ErrorKind.SESSION_NOT_TRANSMITTED
