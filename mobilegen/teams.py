"""Apple development teams read from signing certificates."""

from __future__ import annotations

import logging
import re
from collections.abc import Iterable
from dataclasses import dataclass

from cryptography import x509
from cryptography.x509.oid import NameOID, ObjectIdentifier

log = logging.getLogger(__name__)

_NICE_NAME_RE = re.compile(r"Apple Develop\w+: (.*) \(.+\)")


def _quoted(text: str) -> str:
    escaped = text.replace("\\", "\\\\").replace('"', '\\"')
    return f'"{escaped}"'


class X509FieldError(Exception):
    """A field could not be read from a certificate subject."""


class FromX509Error(Exception):
    """A certificate could not be turned into a team."""


@dataclass(frozen=True, order=True)
class Team:
    name: str
    id: str


def get_x509_field(
    subject_name: x509.Name, field_name: str, field_oid: ObjectIdentifier
) -> str:
    """Return the first value of `field_oid` in `subject_name` as text."""
    attributes = subject_name.get_attributes_for_oid(field_oid)
    if not attributes:
        raise X509FieldError(
            f"Missing X509 field {_quoted(field_name)} ({field_oid.dotted_string})"
        )
    value = attributes[0].value
    if isinstance(value, bytes):
        try:
            return value.decode("utf-8")
        except UnicodeDecodeError as err:
            raise X509FieldError(f"Field contained invalid UTF-8: {err}") from err
    return str(value)


def team_from_x509(cert: x509.Certificate) -> Team:
    """Build a team from a development certificate's subject."""
    subject = cert.subject
    try:
        common_name = get_x509_field(subject, "Common Name", NameOID.COMMON_NAME)
    except X509FieldError as err:
        raise FromX509Error(f"skipping cert: {err}") from err

    try:
        name = get_x509_field(subject, "Organization", NameOID.ORGANIZATION_NAME)
        log.debug("found cert %r with organization %r", common_name, name)
    except X509FieldError:
        log.debug(
            "found cert %r but failed to get organization; "
            "falling back to displaying common name",
            common_name,
        )
        match = _NICE_NAME_RE.search(common_name)
        if match is not None:
            name = match[1]
        else:
            log.debug(
                "regex failed to capture nice part of name in cert %r; "
                "falling back to displaying full name",
                common_name,
            )
            name = common_name

    try:
        team_id = get_x509_field(
            subject, "Organizational Unit", NameOID.ORGANIZATIONAL_UNIT_NAME
        )
    except X509FieldError as err:
        raise FromX509Error(f"skipping cert {_quoted(common_name)}: {err}") from err
    return Team(name=name, id=team_id)


def _load_certs(blob: bytes | str) -> list[x509.Certificate]:
    data = blob.encode() if isinstance(blob, str) else blob
    if not data.strip():
        return []
    try:
        return x509.load_pem_x509_certificates(data)
    except ValueError as err:
        raise ValueError(f"Failed to parse X509 cert: {err}") from err


def teams_from_pem(pem_blobs: Iterable[bytes | str]) -> list[Team]:
    """Collect the distinct teams from PEM certificate lists, sorted."""
    certs = [cert for blob in pem_blobs for cert in _load_certs(blob)]
    teams: set[Team] = set()
    for cert in certs:
        try:
            teams.add(team_from_x509(cert))
        except FromX509Error as err:
            log.error("%s", err)
    return sorted(teams)