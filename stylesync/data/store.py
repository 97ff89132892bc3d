"""Parquet-backed persistence for style profiles.

Every profile is one row keyed by ``(user_id, id)``. The fingerprint is
stored as JSON text so the schema stays flat when the fingerprint grows new
fields.
"""

import json
import logging
from dataclasses import replace
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, Dict, List

import polars as pl

from stylesync.profile import SLIDERS, StyleProfile
from stylesync.text.fingerprint import SampleStyle

logger = logging.getLogger(__name__)

EDITABLE_FIELDS = {"name", "tone", "custom_lexicon", "samples"} | set(SLIDERS)


class ProfileStore:
    """Manages the style profile parquet file."""

    SCHEMA = {
        "id": pl.String,
        "user_id": pl.String,
        "name": pl.String,
        "tone": pl.String,
        "formality": pl.Float64,
        "pacing": pl.Float64,
        "descriptiveness": pl.Float64,
        "directness": pl.Float64,
        "custom_lexicon": pl.List(pl.String),
        "samples": pl.List(pl.String),
        "fingerprint": pl.String,
        "created_at": pl.Datetime("us", "UTC"),
        "updated_at": pl.Datetime("us", "UTC"),
    }

    def __init__(self, filepath: str = "datasets/profiles.parquet"):
        self.filepath = Path(filepath)
        self.filepath.parent.mkdir(parents=True, exist_ok=True)

        if not self.filepath.exists():
            self._create_empty()
        else:
            self._validate_schema(self.read())

    def _create_empty(self) -> None:
        """Create empty parquet with correct schema."""
        empty = pl.DataFrame(schema=self.SCHEMA)
        empty.write_parquet(self.filepath)

    def _validate_schema(self, df: pl.DataFrame) -> None:
        missing = set(self.SCHEMA) - set(df.columns)
        if missing:
            raise ValueError(
                f"Profile store {self.filepath} is missing columns: {', '.join(sorted(missing))}"
            )

    def read(self) -> pl.DataFrame:
        """Read every stored profile."""
        return pl.read_parquet(self.filepath)

    def _key(self, user_id: str, profile_id: str) -> pl.Expr:
        return (pl.col("user_id") == user_id) & (pl.col("id") == profile_id)

    def _to_row(self, profile: StyleProfile) -> Dict[str, Any]:
        return {
            "id": profile.id,
            "user_id": profile.user_id,
            "name": profile.name,
            "tone": profile.tone,
            "formality": float(profile.formality),
            "pacing": float(profile.pacing),
            "descriptiveness": float(profile.descriptiveness),
            "directness": float(profile.directness),
            "custom_lexicon": list(profile.custom_lexicon),
            "samples": list(profile.samples),
            "fingerprint": json.dumps(profile.fingerprint.to_dict()) if profile.fingerprint else None,
            "created_at": profile.created_at,
            "updated_at": profile.updated_at,
        }

    def _from_row(self, row: Dict[str, Any]) -> StyleProfile:
        fingerprint = None
        if row["fingerprint"]:
            fingerprint = SampleStyle.from_dict(json.loads(row["fingerprint"]))
        return StyleProfile(
            id=row["id"],
            user_id=row["user_id"],
            name=row["name"],
            tone=row["tone"],
            formality=row["formality"],
            pacing=row["pacing"],
            descriptiveness=row["descriptiveness"],
            directness=row["directness"],
            custom_lexicon=list(row["custom_lexicon"] or []),
            samples=list(row["samples"] or []),
            fingerprint=fingerprint,
            created_at=row["created_at"],
            updated_at=row["updated_at"],
        )

    def _validate_profile(self, profile: StyleProfile) -> None:
        for field, value in [("id", profile.id), ("user_id", profile.user_id), ("name", profile.name)]:
            if not value or not value.strip():
                raise ValueError(f"{field} cannot be empty")

    def create(self, profile: StyleProfile) -> str:
        """Store a new profile. Returns the profile ID."""
        self._validate_profile(profile)

        existing_df = self.read()
        if not existing_df.filter(self._key(profile.user_id, profile.id)).is_empty():
            raise ValueError(f"Profile '{profile.id}' already exists for user '{profile.user_id}'")

        new_row = pl.DataFrame([self._to_row(profile)], schema=self.SCHEMA)
        updated = pl.concat([existing_df, new_row])
        updated.write_parquet(self.filepath)
        logger.info("Created profile %s for user %s", profile.id, profile.user_id)
        return profile.id

    def get(self, user_id: str, profile_id: str) -> StyleProfile:
        """Load one profile, raising KeyError when it does not exist."""
        rows = self.read().filter(self._key(user_id, profile_id)).to_dicts()
        if not rows:
            raise KeyError(f"Profile '{profile_id}' not found for user '{user_id}'")
        return self._from_row(rows[0])

    def list(self, user_id: str) -> List[StyleProfile]:
        """All profiles owned by a user, oldest first."""
        df = self.read().filter(pl.col("user_id") == user_id).sort("created_at")
        return [self._from_row(row) for row in df.to_dicts()]

    def update(self, user_id: str, profile_id: str, **changes: Any) -> StyleProfile:
        """Change editable fields of a stored profile.

        Changing ``samples`` re-extracts the fingerprint.

        Args:
            user_id: Owner of the profile
            profile_id: Profile to change
            **changes: New values for name, tone, sliders, custom_lexicon or samples

        Returns:
            The updated profile

        Raises:
            KeyError: If the profile does not exist
            ValueError: If a field is unknown or a value is invalid
        """
        unknown = set(changes) - EDITABLE_FIELDS
        if unknown:
            raise ValueError(f"Cannot update fields: {', '.join(sorted(unknown))}")

        profile = self.get(user_id, profile_id)
        samples = changes.pop("samples", None)
        profile = replace(profile, updated_at=datetime.now(timezone.utc), **changes)
        if samples is not None:
            profile = profile.with_samples(samples)
        self._validate_profile(profile)

        df = self.read()
        new_row = pl.DataFrame([self._to_row(profile)], schema=self.SCHEMA)
        updated = pl.concat([df.filter(~self._key(user_id, profile_id)), new_row])
        updated.write_parquet(self.filepath)
        logger.info("Updated profile %s for user %s", profile_id, user_id)
        return profile

    def delete(self, user_id: str, profile_id: str) -> None:
        """Remove a profile, raising KeyError when it does not exist."""
        df = self.read()
        key = self._key(user_id, profile_id)
        if df.filter(key).is_empty():
            raise KeyError(f"Profile '{profile_id}' not found for user '{user_id}'")
        df.filter(~key).write_parquet(self.filepath)
        logger.info("Deleted profile %s for user %s", profile_id, user_id)
