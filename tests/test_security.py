"""
Token signing and password hashing.
"""
import base64
import json

import pytest

from shopfront.security import InvalidToken, TokenSigner, make_password_context


class TestTokenSigner:

    def test_round_trip(self):
        signer = TokenSigner("s3cret")
        payload = signer.verify(signer.sign("abc123"))
        assert payload["user_id"] == "abc123"
        assert "exp" not in payload

    def test_other_secret_rejected(self):
        token = TokenSigner("one").sign("abc")
        with pytest.raises(InvalidToken):
            TokenSigner("two").verify(token)

    def test_alg_none_rejected(self):
        signer = TokenSigner("s3cret")
        _, payload, _ = signer.sign("abc").split(".")
        header = base64.urlsafe_b64encode(json.dumps({"alg": "none"}).encode()).rstrip(b"=").decode()
        with pytest.raises(InvalidToken):
            signer.verify(f"{header}.{payload}.")

    @pytest.mark.parametrize("token", ["", "a.b", "a.b.c.d", "!!!.###.$$$"])
    def test_malformed(self, token):
        with pytest.raises(InvalidToken):
            TokenSigner("s3cret").verify(token)

    def test_empty_secret_refused(self):
        with pytest.raises(ValueError):
            TokenSigner("")


class TestPasswordContext:

    def test_hash_and_verify(self):
        ctx = make_password_context(rounds=4)
        hashed = ctx.hash("hunter2")
        assert hashed != "hunter2"
        assert ctx.verify("hunter2", hashed)
        assert not ctx.verify("hunter3", hashed)
