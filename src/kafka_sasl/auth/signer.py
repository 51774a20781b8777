"""
SigV4 query-string presigning backed by botocore.

botocore's SigV4QueryAuth reads the wall clock when signing. The MSK IAM
handshake needs a caller-supplied signing time so payloads are reproducible
under test, so the signer subclasses it and pins the timestamp.
"""

import logging
from datetime import UTC, datetime

from botocore.auth import SIGV4_TIMESTAMP, SigV4QueryAuth
from botocore.awsrequest import AWSRequest
from botocore.credentials import ReadOnlyCredentials
from botocore.exceptions import BotoCoreError, NoCredentialsError

from kafka_sasl.errors.exceptions import SigningError

logger = logging.getLogger(__name__)

EXPIRES_PARAM = "X-Amz-Expires"


class _PinnedTimeSigV4QueryAuth(SigV4QueryAuth):
    """SigV4QueryAuth signing at a fixed time with a fixed payload hash."""

    def __init__(
        self,
        credentials: ReadOnlyCredentials,
        service_name: str,
        region_name: str,
        expires: int,
        signing_time: datetime,
        payload_hash: str,
    ):
        super().__init__(credentials, service_name, region_name, expires=expires)
        self._signing_time = signing_time
        self._payload_hash = payload_hash

    def payload(self, request):
        return self._payload_hash

    def add_auth(self, request):
        if self.credentials is None:
            raise NoCredentialsError()
        request.context["timestamp"] = self._signing_time.strftime(SIGV4_TIMESTAMP)
        self._modify_request_before_signing(request)
        canonical_request = self.canonical_request(request)
        string_to_sign = self.string_to_sign(request, canonical_request)
        signature = self.signature(string_to_sign, request)
        self._inject_signature_to_request(request, signature)


def _as_utc(value: datetime) -> datetime:
    # Naive datetimes are taken to already be UTC
    if value.tzinfo is None:
        return value.replace(tzinfo=UTC)
    return value.astimezone(UTC)


class BotocoreSigner:
    """
    Presigns requests with AWS Signature Version 4 query parameters.

    The request's `X-Amz-Expires` param, when present, becomes the presign
    expiry; botocore re-emits it alongside the other auth params.
    """

    async def presign(
        self,
        request: AWSRequest,
        credentials: ReadOnlyCredentials,
        payload_hash: str,
        service: str,
        region: str,
        signing_time: datetime,
    ) -> tuple[str, dict[str, str]]:
        params = dict(request.params or {})
        try:
            expires = int(params.pop(EXPIRES_PARAM, SigV4QueryAuth.DEFAULT_EXPIRES))
        except (TypeError, ValueError) as e:
            raise SigningError(f"invalid {EXPIRES_PARAM} value", cause=e) from e
        request.params = params

        auth = _PinnedTimeSigV4QueryAuth(
            credentials,
            service,
            region,
            expires=expires,
            signing_time=_as_utc(signing_time),
            payload_hash=payload_hash,
        )
        try:
            auth.add_auth(request)
            signed_headers = dict(auth.headers_to_sign(request).items())
        except (BotoCoreError, ValueError, TypeError, AttributeError) as e:
            logger.error(
                "Failed to presign request",
                extra={"region": region, "error": str(e), "error_type": type(e).__name__},
            )
            raise SigningError(cause=e, context={"service": service, "region": region}) from e

        return request.url, signed_headers


__all__ = ["BotocoreSigner", "EXPIRES_PARAM"]
