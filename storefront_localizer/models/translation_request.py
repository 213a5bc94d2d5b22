"""Translation request model."""

from dataclasses import dataclass, field
from typing import Any, Dict, Mapping, Optional

from ..errors import ValidationError


@dataclass(frozen=True)
class TranslationRequest:
    """
    A single piece of content to translate.

    `context` carries free-form hints: contentType, tone, formality,
    requiredTerms, forbiddenTerms and preferredTerms.
    """

    text: str
    from_lang: str
    to_lang: str
    context: Dict[str, Any] = field(default_factory=dict)
    id: Optional[str] = None

    @property
    def content_type(self) -> Optional[str]:
        return content_type_of(self.context)

    def validate(self) -> None:
        """Raise ValidationError if a required field is missing."""
        missing = [
            name
            for name in ("text", "from_lang", "to_lang")
            if not isinstance(getattr(self, name), str) or not getattr(self, name).strip()
        ]
        if missing:
            raise ValidationError(f"Missing required fields: {', '.join(missing)}")
        if not isinstance(self.context, Mapping):
            raise ValidationError("context must be a mapping")

        for name in ("requiredTerms", "forbiddenTerms"):
            terms = self.context.get(name)
            if terms is None or isinstance(terms, str):
                continue
            if not isinstance(terms, (list, tuple)) or not all(isinstance(t, str) for t in terms):
                raise ValidationError(f"context {name} must be a term or a list of terms")

        preferred = self.context.get("preferredTerms")
        if preferred is not None and not isinstance(preferred, Mapping):
            raise ValidationError("context preferredTerms must map source terms to preferred terms")


def content_type_of(context: Optional[Mapping[str, Any]]) -> Optional[str]:
    """Read the content type hint, accepting both key spellings."""
    if not context:
        return None
    return context.get("contentType") or context.get("content_type")
