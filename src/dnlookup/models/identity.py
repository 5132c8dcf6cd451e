"""Models for certificate principals."""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field

__all__ = ["SubjectIssuerDNPair"]


class SubjectIssuerDNPair(BaseModel):
    """A certificate principal identified by its subject and issuer DNs.

    The string form of this object is the key under which the resolved user
    record is cached, so two pairs with the same string form are treated as
    the same principal.
    """

    model_config = ConfigDict(frozen=True)

    subject_dn: str = Field(
        ...,
        title="Subject DN",
        description="Distinguished name of the certificate subject",
        examples=["uid=1,cn=alice,dc=example,dc=com"],
        min_length=1,
    )

    issuer_dn: str | None = Field(
        None,
        title="Issuer DN",
        description="Distinguished name of the certificate issuer",
        examples=["cn=example ca,dc=example,dc=com"],
    )

    def __str__(self) -> str:
        if self.issuer_dn is None:
            return self.subject_dn
        return f"{self.subject_dn}<{self.issuer_dn}>"
