"""Style profiles: target sliders, custom lexicon, samples and cached fingerprint."""

from dataclasses import dataclass, field, replace
from datetime import datetime, timezone
from typing import List, Optional
from uuid import uuid4

from stylesync.config import DEFAULT_SETTINGS, Settings
from stylesync.text.fingerprint import SampleStyle, extract_style

SLIDERS = ("formality", "pacing", "descriptiveness", "directness")


@dataclass
class StyleProfile:
    """Named, user-owned rewrite target.

    Sliders are normalized to [0, 1]. When samples are given without a
    fingerprint the fingerprint is extracted once on creation.
    """

    name: str = "Default"
    formality: float = 0.5
    pacing: float = 0.5
    descriptiveness: float = 0.5
    directness: float = 0.5
    tone: str = "neutral"
    custom_lexicon: List[str] = field(default_factory=list)
    samples: List[str] = field(default_factory=list)
    fingerprint: Optional[SampleStyle] = None
    id: str = field(default_factory=lambda: str(uuid4()))
    user_id: str = "local"
    created_at: datetime = field(default_factory=lambda: datetime.now(timezone.utc))
    updated_at: datetime = field(default_factory=lambda: datetime.now(timezone.utc))

    def __post_init__(self):
        for slider in SLIDERS:
            value = getattr(self, slider)
            if not 0.0 <= value <= 1.0:
                raise ValueError(f"{slider} must be between 0 and 1, got {value}")
        self.custom_lexicon = [term.strip() for term in self.custom_lexicon if term and term.strip()]
        if self.fingerprint is None and any(s.strip() for s in self.samples):
            self.fingerprint = extract_style(self.samples)

    def with_samples(self, samples: List[str]) -> "StyleProfile":
        """Return a copy holding new samples and a freshly extracted fingerprint."""
        return replace(
            self,
            samples=list(samples),
            fingerprint=extract_style(samples) if any(s.strip() for s in samples) else None,
            updated_at=datetime.now(timezone.utc),
        )


def allows_contractions(
    profile: Optional[StyleProfile], settings: Settings = DEFAULT_SETTINGS
) -> bool:
    """Decide whether rewritten text may use contractions.

    The fingerprint wins when present. Otherwise highly formal profiles avoid
    contractions. Without a profile contractions are allowed.
    """
    if profile is None:
        return True
    if profile.fingerprint is not None:
        return profile.fingerprint.uses_contractions
    return profile.formality < settings.formal_threshold


@dataclass(frozen=True)
class RewriteOptions:
    """Per-call switches for rewrite()."""

    include_lexicon_notes: bool = False
