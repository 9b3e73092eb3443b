"""Encrypted parameter lookup (SSM Parameter Store)."""

from __future__ import annotations

import logging

from runbot_core.aws.session import make_client
from runbot_core.errors import RunbotError

logger = logging.getLogger(__name__)


def fetch_parameter(name: str, region: str, client=None) -> str:
    """Return the decrypted value of an SSM parameter.

    ClientError from boto3 propagates; an empty value raises RunbotError.
    """
    ssm = client if client is not None else make_client("ssm", region)
    resp = ssm.get_parameter(Name=name, WithDecryption=True)
    value = (resp.get("Parameter") or {}).get("Value")
    if not value:
        raise RunbotError(f"Got empty ssm parameter {name}")
    logger.debug("Fetched ssm parameter %s", name)
    return value
