from __future__ import annotations

import boto3


def make_client(service: str, region: str):
    return boto3.session.Session(region_name=region).client(service)
