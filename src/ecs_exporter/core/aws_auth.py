# src/ecs_exporter/core/aws_auth.py
"""
IAM role assumption for the ECS client.

The base credentials come from the standard AWS chain (optionally a named
profile). When a role is configured, an STS ``AssumeRole`` call exchanges
them for temporary credentials, which are refreshed by calling STS again
shortly before they expire.
"""

import logging
from typing import Any, Awaitable, Callable, Dict, Optional

import aioboto3
from aiobotocore.credentials import AioRefreshableCredentials
from aiobotocore.session import get_session

logger = logging.getLogger(__name__)

DEFAULT_SESSION_NAME = "ecs-exporter"
SESSION_DURATION_SECONDS = 3600

# botocore credential metadata key -> STS response key
CREDENTIALS_MAP = {
    "access_key": "AccessKeyId",
    "secret_key": "SecretAccessKey",
    "token": "SessionToken",
}


def get_aws_credentials(sts_assume_role_response: Dict[str, Any]) -> Dict[str, str]:
    """Maps an STS ``AssumeRole`` response to refreshable credential metadata."""
    credentials = sts_assume_role_response["Credentials"]
    metadata = {k: credentials[v] for k, v in CREDENTIALS_MAP.items()}
    metadata["expiry_time"] = credentials["Expiration"].isoformat()
    return metadata


def role_credentials_fetcher(
    base_session: aioboto3.Session,
    role_arn: str,
    external_id: Optional[str] = None,
    session_name: Optional[str] = None,
) -> Callable[[], Awaitable[Dict[str, str]]]:
    """Returns a coroutine function that assumes ``role_arn`` with ``base_session``'s credentials."""
    request = {
        "RoleArn": role_arn,
        "RoleSessionName": session_name or DEFAULT_SESSION_NAME,
        "DurationSeconds": SESSION_DURATION_SECONDS,
    }
    if external_id:
        request["ExternalId"] = external_id

    async def fetch() -> Dict[str, str]:
        logger.info("Assuming role %s (session %s).", role_arn, request["RoleSessionName"])
        async with base_session.client("sts") as sts_client:
            assumed_role = await sts_client.assume_role(**request)
        metadata = get_aws_credentials(assumed_role)
        logger.debug("Credentials for role %s expire at %s.", role_arn, metadata["expiry_time"])
        return metadata

    return fetch


async def assume_role_session(
    role_arn: str,
    region: Optional[str] = None,
    profile: Optional[str] = None,
    external_id: Optional[str] = None,
    session_name: Optional[str] = None,
) -> aioboto3.Session:
    """
    Builds a session whose credentials are those of ``role_arn``.

    The first ``AssumeRole`` call happens here, so a role that cannot be
    assumed fails at startup rather than on the first scrape.
    """
    base_session = aioboto3.Session(profile_name=profile, region_name=region)
    fetch = role_credentials_fetcher(base_session, role_arn, external_id=external_id, session_name=session_name)
    credentials = AioRefreshableCredentials.create_from_metadata(
        metadata=await fetch(),
        refresh_using=fetch,
        method="sts-assume-role",
    )

    botocore_session = get_session()
    botocore_session._credentials = credentials
    return aioboto3.Session(botocore_session=botocore_session, region_name=region or base_session.region_name)
