"""Tests for free and paid upload use cases."""
import hashlib
from unittest.mock import AsyncMock

import httpx
import pytest

from conftest import UPLOAD_URL, FakeSuperbed, make_context, make_host
from superbed.errors import (
    LoginFailed,
    ProviderResponseError,
    UploadFailed,
    UrlResolutionFailed,
)
from superbed.models import Credentials, Image, UploadMode, UploadTicket
from superbed.use_cases import (
    FreeUploadUseCase,
    PaidUploadUseCase,
    ResolveRealUrlsUseCase,
    ResolveUploadModeUseCase,
    SignInUseCase,
    build_signed_fields,
    chunk_images,
    extract_paid_urls,
    parse_response,
    sign_request,
)

FREE = Credentials(username="alice", password="secret")


def _images(count):
    return [Image(buffer=b"x" * (i + 1), file_name=f"img{i:02d}.png") for i in range(count)]


class TestChunkImages:
    @pytest.mark.parametrize("count,sizes", [
        (1, [1]),
        (5, [5]),
        (6, [5, 1]),
        (12, [5, 5, 2]),
        (15, [5, 5, 5]),
    ])
    def test_batch_sizes(self, count, sizes):
        batches = chunk_images(_images(count))
        assert [len(b) for b in batches] == sizes

    def test_concatenation_keeps_order(self):
        images = _images(23)
        batches = chunk_images(images)
        assert [img for batch in batches for img in batch] == images
        assert len(batches) == 5

    def test_empty_list_has_no_batches(self):
        assert chunk_images([]) == []

    def test_rejects_zero_size(self):
        with pytest.raises(ValueError):
            chunk_images(_images(2), 0)


class TestSigning:
    def test_sign_is_md5_of_token_ts_nonce(self):
        expected = hashlib.md5(b"abc_1700000000_646703147").hexdigest()
        assert sign_request("abc", 1700000000, 646703147) == expected

    def test_sign_is_deterministic_and_lowercase(self):
        first = sign_request("tok", 42, 646703147)
        assert first == sign_request("tok", 42, 646703147)
        assert first == first.lower()
        assert len(first) == 32

    def test_signed_fields(self):
        fields = build_signed_fields("tok", 42, 646703147)
        assert fields == {
            "nonce": 646703147,
            "ts": 42,
            "token": "tok",
            "sign": sign_request("tok", 42, 646703147),
            "_xsrf": "",
            "endpoints": "superbed",
            "categories": "",
        }


class TestParseResponse:
    def test_invalid_json(self):
        with pytest.raises(ProviderResponseError, match="invalid JSON"):
            parse_response("<html>")

    def test_missing_err(self):
        with pytest.raises(ProviderResponseError):
            parse_response('{"ok": true}')

    def test_valid(self):
        assert parse_response('{"err": 0, "x": 1}') == {"err": 0, "x": 1}


class TestResolveUploadMode:
    def test_token_wins(self):
        creds = Credentials(token="t", username="u", password="p")
        assert ResolveUploadModeUseCase.execute(creds) is UploadMode.PAID

    def test_login_pair(self):
        assert ResolveUploadModeUseCase.execute(FREE) is UploadMode.FREE

    @pytest.mark.parametrize("creds", [
        Credentials(),
        Credentials(username="u"),
        Credentials(password="p"),
    ])
    def test_insufficient(self, creds):
        assert ResolveUploadModeUseCase.execute(creds) is UploadMode.NONE


class TestSignIn:
    @pytest.mark.asyncio
    async def test_sends_login_form_with_fixed_headers(self, settings, provider):
        host = make_host(provider)

        token = await SignInUseCase().execute(host, settings, FREE)

        assert token == "session-token"
        call = host.requester.calls[0]
        assert call.method == "POST"
        assert call.url == "https://www.superbed.cn/signin"
        assert call.data == {"username": "alice", "password": "secret", "remember": "on"}
        assert call.headers == {"User-Agent": "Mozilla/5.0", "Referrer": "https://www.superbed.cn/"}

    @pytest.mark.asyncio
    async def test_err_raises_login_failed(self, settings):
        host = make_host(FakeSuperbed(login_error="wrong password"))

        with pytest.raises(LoginFailed, match="wrong password") as exc_info:
            await SignInUseCase().execute(host, settings, FREE)
        assert exc_info.value.msg == "wrong password"


class TestResolveRealUrls:
    @pytest.mark.asyncio
    async def test_keeps_id_order_and_encodes_forward(self, settings):
        host = make_host(lambda call: {
            "err": 0,
            "results": {"b": {"url": "https://i/b"}, "a": {"url": "https://i/a"}},
        })

        result = await ResolveRealUrlsUseCase().execute(host, settings, "f/w=1", ["a", "b"])

        assert result.entries == (("a", "https://i/a"), ("b", "https://i/b"))
        assert host.requester.calls[0].url == "https://www.superbed.cn/?forward=f%2Fw%3D1&ids=a,b"

    @pytest.mark.asyncio
    async def test_accepts_index_url_pairs(self, settings):
        host = make_host(lambda call: {"err": 0, "results": {"a": [0, "https://i/a"]}})
        result = await ResolveRealUrlsUseCase().execute(host, settings, "fw", ["a"])
        assert result.urls == ["https://i/a"]

    @pytest.mark.asyncio
    async def test_missing_id_fails(self, settings):
        host = make_host(lambda call: {"err": 0, "results": {}})
        with pytest.raises(UrlResolutionFailed, match="id a"):
            await ResolveRealUrlsUseCase().execute(host, settings, "fw", ["a"])

    @pytest.mark.asyncio
    async def test_err_fails(self, settings):
        host = make_host(lambda call: {"err": 3, "msg": "expired"})
        with pytest.raises(UploadFailed, match="expired"):
            await ResolveRealUrlsUseCase().execute(host, settings, "fw", ["a"])


class TestFreeUpload:
    @pytest.mark.asyncio
    async def test_twelve_images_three_batches_in_order(self, settings, provider):
        host = make_host(provider)
        images = make_context(12).images

        urls = await FreeUploadUseCase().execute(host, settings, FREE, images)

        assert [len(b) for b in provider.batches] == [5, 5, 2]
        assert urls == [f"https://img.example/{img.file_name}" for img in images]

    @pytest.mark.asyncio
    async def test_request_sequence_is_strictly_sequential(self, settings, provider):
        host = make_host(provider)

        await FreeUploadUseCase().execute(host, settings, FREE, make_context(7).images)

        kinds = []
        for call in host.requester.calls:
            if call.url.endswith("/signin"):
                kinds.append("login")
            elif call.url.endswith("?code=1"):
                kinds.append("ticket")
            elif call.url == UPLOAD_URL:
                kinds.append("upload")
            else:
                kinds.append("resolve")
        assert kinds == ["login", "ticket", "upload", "resolve", "upload", "resolve"]

    @pytest.mark.asyncio
    async def test_batches_share_signed_session_fields(self, settings, provider):
        host = make_host(provider)

        await FreeUploadUseCase().execute(host, settings, FREE, make_context(6).images)

        uploads = FakeSuperbed.upload_calls(host.requester)
        assert uploads[0].data == uploads[1].data
        assert uploads[0].data["sign"] == sign_request("session-token", 1700000000, 646703147)
        assert uploads[0].headers["Cookie"] == "token=session-token"
        assert [name for name, _ in uploads[1].files] == ["file0"]

    @pytest.mark.asyncio
    async def test_failed_batch_aborts_remaining(self, settings):
        provider = FakeSuperbed(fail_batch=2)
        host = make_host(provider)

        with pytest.raises(UploadFailed, match="quota exceeded"):
            await FreeUploadUseCase().execute(host, settings, FREE, make_context(12).images)

        # Batch 1 stays on the provider side; batch 3 is never sent.
        assert len(provider.batches) == 2

    @pytest.mark.asyncio
    async def test_empty_images_issue_no_requests(self, settings, provider):
        host = make_host(provider)
        assert await FreeUploadUseCase().execute(host, settings, FREE, []) == []
        assert host.requester.calls == []

    @pytest.mark.asyncio
    async def test_login_failure_skips_ticket(self, settings):
        sign_in = AsyncMock()
        sign_in.execute.side_effect = LoginFailed("wrong password")
        request_ticket = AsyncMock()
        use_case = FreeUploadUseCase(sign_in=sign_in, request_ticket=request_ticket)

        with pytest.raises(LoginFailed):
            await use_case.execute(make_host(None), settings, FREE, _images(1))

        request_ticket.execute.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_transport_error_propagates_unchanged(self, settings):
        error = httpx.ConnectError("boom")
        host = make_host(lambda call: error)

        with pytest.raises(httpx.ConnectError) as exc_info:
            await FreeUploadUseCase().execute(host, settings, FREE, _images(1))
        assert exc_info.value is error

    @pytest.mark.asyncio
    async def test_uses_ticket_timestamp(self, settings):
        request_ticket = AsyncMock()
        request_ticket.execute.return_value = UploadTicket(url=UPLOAD_URL, ts=99, token="t")
        provider = FakeSuperbed()
        host = make_host(provider)

        await FreeUploadUseCase(request_ticket=request_ticket).execute(host, settings, FREE, _images(1))

        assert FakeSuperbed.upload_calls(host.requester)[0].data["ts"] == 99


class TestPaidUpload:
    @pytest.mark.asyncio
    async def test_single_request_for_all_images(self, settings, provider):
        host = make_host(provider)
        images = _images(8)

        urls = await PaidUploadUseCase().execute(host, settings, "tok en", images)

        assert len(host.requester.calls) == 1
        call = host.requester.calls[0]
        assert call.url == "https://api.superbed.cn/upload?token=tok+en"
        assert [name for name, _ in call.files] == [f"file{i}" for i in range(8)]
        assert urls == [f"https://paid.example/{img.file_name}" for img in images]

    @pytest.mark.asyncio
    async def test_err_raises_upload_failed(self, settings):
        host = make_host(lambda call: {"err": 1, "msg": "token invalid"})
        with pytest.raises(UploadFailed, match="token invalid"):
            await PaidUploadUseCase().execute(host, settings, "tok", _images(1))

    @pytest.mark.asyncio
    async def test_url_count_mismatch(self, settings):
        host = make_host(lambda call: {"err": 0, "urls": {"0": "https://p/0"}})
        with pytest.raises(UploadFailed, match="expected 2 urls"):
            await PaidUploadUseCase().execute(host, settings, "tok", _images(2))

    def test_extract_paid_urls_uses_response_order(self):
        assert extract_paid_urls({"b": "u1", "a": "u2"}) == ["u1", "u2"]
        assert extract_paid_urls(["u1"]) == ["u1"]
        with pytest.raises(UploadFailed):
            extract_paid_urls("nope")
