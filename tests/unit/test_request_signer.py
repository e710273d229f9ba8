import pytest

from src.models.request import PayoutRequest, SignedRequest
from src.signing.request_signer import RequestSigner
from src.utils.canonical import canonicalize
from src.utils.crypto import sign


API_SECRET = "test_secret_key"
FIXED_NOW = 1753451591
NONCE = "0123456789abcdef0123456789abcdef"


class TestSignRequest:
    """Tests for RequestSigner.sign_request()."""

    @pytest.mark.unit
    def test_envelope_carries_clock_nonce_and_original_data(self, request_signer):
        data = {"orderId": "order-1", "amount": 10}
        envelope = request_signer.sign_request(data)

        assert isinstance(envelope, SignedRequest)
        assert envelope.timestamp == FIXED_NOW
        assert envelope.nonce == NONCE
        assert envelope.data is data

    @pytest.mark.unit
    def test_signature_covers_data_nonce_and_timestamp(self, request_signer):
        data = {"orderId": "order-1", "amount": 10}
        envelope = request_signer.sign_request(data)

        expected_message = f"data={{amount=10,orderId=order-1}}&nonce={NONCE}&timestamp={FIXED_NOW}"
        assert envelope.sign == sign(expected_message, API_SECRET)

    @pytest.mark.unit
    def test_timestamp_is_truncated_to_seconds(self):
        signer = RequestSigner(API_SECRET, clock=lambda: 1753451591.987, nonce_source=lambda: NONCE)
        assert signer.sign_request({}).timestamp == 1753451591

    @pytest.mark.unit
    def test_default_nonce_source_is_random_hex(self):
        signer = RequestSigner(API_SECRET)
        first = signer.sign_request({})
        second = signer.sign_request({})
        assert len(first.nonce) == 32
        assert first.nonce != second.nonce

    @pytest.mark.unit
    def test_typed_request_is_signed_through_to_value(self, request_signer):
        request = PayoutRequest(amount=100.0, symbol="USDT", chain="TRON", uid="user123",
                                receive_address="TXmVthgn6yT1kANGJHTHcbEGEKYDLLGJGp")
        envelope = request_signer.sign_request(request)

        message = canonicalize({"data": request.to_value(), "nonce": NONCE, "timestamp": FIXED_NOW})
        assert "amount=100.0" in message
        assert "orderId" not in message
        assert envelope.sign == sign(message, API_SECRET)
        assert envelope.data is request

    @pytest.mark.unit
    def test_none_data_signs_as_empty_object(self, request_signer):
        envelope = request_signer.sign_request(None)
        assert envelope.sign == sign(f"data={{}}&nonce={NONCE}&timestamp={FIXED_NOW}", API_SECRET)

    @pytest.mark.unit
    def test_unsupported_data_type_raises(self, request_signer):
        with pytest.raises(TypeError):
            request_signer.sign_request(["not", "an", "object"])

    @pytest.mark.unit
    def test_envelope_to_dict_is_wire_shape(self, request_signer):
        request = PayoutRequest(amount=5.0, uid="u1")
        body = request_signer.sign_request(request).to_dict()
        assert body == {
            "sign": body["sign"],
            "timestamp": FIXED_NOW,
            "nonce": NONCE,
            "data": {"amount": 5.0, "uid": "u1"},
        }


class TestVerifyEnvelope:
    """Tests for RequestSigner.verify_envelope()."""

    @pytest.mark.unit
    def test_signed_envelope_verifies(self, request_signer):
        body = request_signer.sign_request({"orderId": "order-1"}).to_dict()
        assert request_signer.verify_envelope(body) is True

    @pytest.mark.unit
    @pytest.mark.parametrize(
        "field,value",
        [("nonce", "ffffffffffffffffffffffffffffffff"), ("timestamp", FIXED_NOW + 1)],
    )
    def test_tampered_envelope_fields_fail(self, request_signer, field, value):
        body = request_signer.sign_request({"orderId": "order-1"}).to_dict()
        body[field] = value
        assert request_signer.verify_envelope(body) is False

    @pytest.mark.unit
    def test_tampered_data_fails(self, request_signer):
        body = request_signer.sign_request({"orderId": "order-1", "amount": 10}).to_dict()
        body["data"]["amount"] = 11
        assert request_signer.verify_envelope(body) is False

    @pytest.mark.unit
    def test_missing_sign_fails(self, request_signer):
        body = request_signer.sign_request({"orderId": "order-1"}).to_dict()
        del body["sign"]
        assert request_signer.verify_envelope(body) is False

    @pytest.mark.unit
    def test_wrong_secret_fails(self, request_signer):
        body = request_signer.sign_request({"orderId": "order-1"}).to_dict()
        assert RequestSigner("other-secret").verify_envelope(body) is False

    @pytest.mark.unit
    def test_non_object_data_fails(self, request_signer):
        assert request_signer.verify_envelope({"sign": "x", "nonce": NONCE, "data": [1, 2]}) is False
