"""
Prowjob Descriptor Codec

Decodes prowjob.json (JSON or YAML) and re-encodes it in the canonical YAML
form written to the local cache.
"""

import json

import yaml

from job_run_aggregator.domain.value_objects import ProwJob
from job_run_aggregator.errors import DescriptorParseError


def parse_prowjob(prowjob_bytes: bytes) -> ProwJob:
    """
    Decode a prowjob document and strip its managed fields.

    Documents starting with ``{`` are decoded as JSON, anything else as YAML.

    Args:
        prowjob_bytes: Raw descriptor content

    Returns:
        ProwJob without ``metadata.managedFields``

    Raises:
        DescriptorParseError: Content is not a decodable mapping
    """
    try:
        text = prowjob_bytes.decode("utf-8")
        if text.lstrip().startswith("{"):
            document = json.loads(text)
        else:
            document = yaml.safe_load(text)
    except (UnicodeDecodeError, json.JSONDecodeError, yaml.YAMLError) as e:
        raise DescriptorParseError(f"failed to decode prowjob: {e}") from e

    if not isinstance(document, dict):
        raise DescriptorParseError(
            "prowjob document is not a mapping",
            {"type": type(document).__name__},
        )

    prowjob = ProwJob(document=document)
    prowjob.strip_managed_fields()
    return prowjob


def serialize_prowjob(prowjob: ProwJob) -> bytes:
    """Encode a prowjob in the canonical on-disk YAML form."""
    return yaml.safe_dump(
        prowjob.document,
        default_flow_style=False,
        sort_keys=False,
        allow_unicode=True,
    ).encode("utf-8")
