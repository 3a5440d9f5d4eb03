"""
Identifier normalization

Callers send customers' CNPJ in whatever shape they have at hand
("12.345.678/0001-90", "12345678000190") or a piece of a name.
classify() decides which lookup mode applies and produces the canonical
value used for comparison.
"""
import re
from dataclasses import dataclass
from enum import Enum

# 14 digits in 2-3-3-4-2 groups; each group boundary may carry one of . / -
STRUCTURED_ID_PATTERN = re.compile(r"^\d{2}[./-]?\d{3}[./-]?\d{3}[./-]?\d{4}[./-]?\d{2}$")

NON_DIGITS = re.compile(r"\D")


class IdentifierKind(str, Enum):
    STRUCTURED_ID = "structured_id"
    FREE_TEXT = "free_text"


@dataclass(frozen=True)
class ClassifiedIdentifier:
    """Input after classification; canonical is digits-only for STRUCTURED_ID"""
    kind: IdentifierKind
    canonical: str

    @property
    def is_structured(self) -> bool:
        return self.kind is IdentifierKind.STRUCTURED_ID


def canonical_tax_id(value: str) -> str:
    """Strip every non-digit character"""
    return NON_DIGITS.sub("", value or "")


def is_structured_id(value: str) -> bool:
    return bool(STRUCTURED_ID_PATTERN.match(value.strip()))


def classify(value: str) -> ClassifiedIdentifier:
    """
    Classify a caller-supplied identifier

    Raises:
        ValueError: for empty/whitespace input (callers reject it earlier
            with MissingParameterError)
    """
    if value is None or not value.strip():
        raise ValueError("identifier must not be blank")

    text = value.strip()
    if is_structured_id(text):
        return ClassifiedIdentifier(IdentifierKind.STRUCTURED_ID, canonical_tax_id(text))
    return ClassifiedIdentifier(IdentifierKind.FREE_TEXT, text)


def format_tax_id(canonical: str) -> str:
    """Render 14 digits as NN.NNN.NNN/NNNN-NN; anything else is returned unchanged"""
    if len(canonical) != 14 or not canonical.isdigit():
        return canonical
    return f"{canonical[:2]}.{canonical[2:5]}.{canonical[5:8]}/{canonical[8:12]}-{canonical[12:]}"
