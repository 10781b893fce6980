"""Multi-doc YAML parsing into validated resource descriptors."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any

import yaml

from helm_drift.errors import NonStringKeyError, ParseError
from helm_drift.observability.logging import get_logger

logger = get_logger("parser")


class ManifestLoader(yaml.SafeLoader):
    """SafeLoader that keeps unquoted dates and timestamps as strings.

    The API server returns them as JSON strings, so the declared side must
    not turn them into datetime objects.
    """


ManifestLoader.yaml_implicit_resolvers = {
    first_char: [
        (tag, regexp)
        for tag, regexp in resolvers
        if tag != "tag:yaml.org,2002:timestamp"
    ]
    for first_char, resolvers in yaml.SafeLoader.yaml_implicit_resolvers.items()
}


@dataclass(frozen=True)
class Resource:
    api_version: str
    kind: str
    name: str
    document: dict[str, Any]
    namespace: str | None = None


def parse_manifest(yaml_text: str) -> list[Resource]:
    """Split multi-doc YAML (---) into Resource objects, in document order.

    Documents that are empty, not mappings, carry non-string keys or lack
    apiVersion/kind/metadata.name are skipped with a warning. Raises
    ParseError if any document is not valid YAML.
    """
    resources: list[Resource] = []

    for index, raw_doc in enumerate(_split_raw_docs(yaml_text)):
        if not raw_doc.strip():
            continue

        try:
            body = yaml.load(raw_doc, Loader=ManifestLoader)
        except yaml.YAMLError as e:
            raise ParseError(f"Document {index} is not valid YAML: {e}") from e

        if body is None:
            continue

        if not isinstance(body, dict):
            logger.warning("skipping_document", index=index, reason="not a mapping")
            continue

        try:
            document = to_string_keys(body)
        except NonStringKeyError as e:
            logger.warning("skipping_document", index=index, reason=str(e))
            continue

        missing = _missing_identity(document)
        if missing:
            logger.warning(
                "skipping_document", index=index, reason=f"missing {missing}"
            )
            continue

        metadata = document["metadata"]
        namespace = metadata.get("namespace")
        resources.append(Resource(
            api_version=document["apiVersion"],
            kind=document["kind"],
            name=metadata["name"],
            document=document,
            namespace=namespace if isinstance(namespace, str) and namespace else None,
        ))

    return resources


def to_string_keys(value: Any) -> Any:
    """Return a copy of value where every nested mapping is a str-keyed dict.

    Raises NonStringKeyError on the first non-string key at any depth.
    """
    if isinstance(value, dict):
        out: dict[str, Any] = {}
        for k, v in value.items():
            if not isinstance(k, str):
                raise NonStringKeyError(k)
            out[k] = to_string_keys(v)
        return out
    if isinstance(value, list):
        return [to_string_keys(item) for item in value]
    return value


def _missing_identity(document: dict[str, Any]) -> str | None:
    """Name the first identity field that is absent or empty, if any."""
    for field_name in ("apiVersion", "kind"):
        if not _non_empty_str(document.get(field_name)):
            return field_name
    metadata = document.get("metadata")
    if not isinstance(metadata, dict):
        return "metadata"
    if not _non_empty_str(metadata.get("name")):
        return "metadata.name"
    return None


def _non_empty_str(value: object) -> bool:
    return isinstance(value, str) and bool(value)


def _split_raw_docs(yaml_text: str) -> list[str]:
    """Split multi-doc YAML by --- delimiters, returning raw text per doc."""
    docs: list[str] = []
    current_lines: list[str] = []

    for line in yaml_text.splitlines(keepends=True):
        if line.rstrip() == "---" or line.startswith("--- "):
            docs.append("".join(current_lines))
            current_lines = []
            # Inline content after the marker belongs to the next document
            rest = line[3:].strip()
            if rest:
                current_lines.append(rest + "\n")
        else:
            current_lines.append(line)

    docs.append("".join(current_lines))
    return docs
